# src/atlas_deploy/core/manifest/codec.py
"""
Conversão entre o manifest tipado e sua forma de documento (dict).

O documento persistido (YAML) usa as chaves declaradas em `metadata["key"]`
dos dataclasses do modelo. A conversão é genérica sobre essas declarações.

Regras de leitura (v1):
    - chave ausente ou `null`      → `UNSET`
    - qualquer outro valor          → `Value` (inclusive `""`, `0`, `false`, `{}`, `[]`)
    - `image.build` como string     → atalho para `image.build.dockerfile`
    - números em campos texto       → convertidos para texto (ex.: `PORT: 8080`)
    - tipo incompatível             → `ManifestValidationError` com o caminho do campo
    - chaves desconhecidas          → ignoradas

Regras de escrita (v1):
    - campos `UNSET` são omitidos; structs sem campos presentes também
    - a ordem das chaves segue a declaração dos dataclasses
    - chaves de mapas são ordenadas, para saída determinística
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Mapping, Optional

from ..exceptions import ManifestValidationError
from .model import BuildConfig, Manifest, ServiceConfig, Workload
from .optional import MERGE_METADATA_KEY, UNSET, MergePolicy, Opt, Unset, Value
from .validate import validate_name, validate_service_config, validate_workload_type


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _invalid(path: str, value: Any, message: str) -> ManifestValidationError:
    return ManifestValidationError(
        message=f"{path}: {message}",
        details={"field_path": path, "value": value},
    )


def _scalar(kind: Any, raw: Any, path: str) -> Any:
    if kind is bool:
        if isinstance(raw, bool):
            return raw
        raise _invalid(path, raw, "valor deve ser booleano")
    if kind is int:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        raise _invalid(path, raw, "valor deve ser um inteiro")
    if kind is str:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        raise _invalid(path, raw, "valor deve ser texto")
    return raw


def _opt_from_raw(meta: Mapping[str, Any], raw: Any, path: str) -> Opt[Any]:
    if raw is None:
        return UNSET

    policy = meta[MERGE_METADATA_KEY]
    kind = meta.get("kind")
    struct = meta.get("struct")

    if policy is MergePolicy.SCALAR:
        return Value(_scalar(kind, raw, path))

    if policy is MergePolicy.REPLACE:
        if not isinstance(raw, list):
            raise _invalid(path, raw, "valor deve ser uma lista")
        return Value([_scalar(kind, item, f"{path}[{i}]") for i, item in enumerate(raw)])

    if policy is MergePolicy.MAP:
        if not isinstance(raw, Mapping):
            raise _invalid(path, raw, "valor deve ser um mapa")
        out: Dict[str, Any] = {}
        for key, item in raw.items():
            item_path = _join(path, str(key))
            if struct is not None:
                out[str(key)] = _struct_from_dict(struct, item or {}, item_path)
            else:
                out[str(key)] = _scalar(kind, item, item_path)
        return Value(out)

    if policy is MergePolicy.OPTIONAL_STRUCT:
        return Value(_struct_from_dict(struct, raw, path))

    raise _invalid(path, raw, f"política de merge não suportada: {policy}")


def _struct_from_dict(cls: Any, data: Any, prefix: str) -> Any:
    if not isinstance(data, Mapping):
        raise _invalid(prefix or "<root>", data, "valor deve ser um mapa")

    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        meta = f.metadata
        key = meta.get("key", "")
        policy = meta[MERGE_METADATA_KEY]

        if policy is MergePolicy.STRUCT:
            sub_cls = meta["struct"]
            if meta.get("inline"):
                kwargs[f.name] = _struct_from_dict(sub_cls, data, prefix)
                continue
            path = _join(prefix, key)
            raw = data.get(key)
            if raw is None:
                kwargs[f.name] = sub_cls()
            elif sub_cls is BuildConfig and isinstance(raw, str):
                kwargs[f.name] = BuildConfig(dockerfile=Value(raw))
            else:
                kwargs[f.name] = _struct_from_dict(sub_cls, raw, path)
            continue

        kwargs[f.name] = _opt_from_raw(meta, data.get(key), _join(prefix, key))

    return cls(**kwargs)


def _raw_from_value(meta: Mapping[str, Any], value: Any) -> Any:
    policy = meta[MERGE_METADATA_KEY]
    if policy is MergePolicy.REPLACE:
        return list(value)
    if policy is MergePolicy.MAP:
        if meta.get("struct") is not None:
            return {k: _struct_to_dict(value[k]) for k in sorted(value)}
        return {k: value[k] for k in sorted(value)}
    if policy is MergePolicy.OPTIONAL_STRUCT:
        return _struct_to_dict(value)
    return value


def _struct_to_dict(obj: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        meta = f.metadata
        value = getattr(obj, f.name)

        if meta[MERGE_METADATA_KEY] is MergePolicy.STRUCT:
            sub = _struct_to_dict(value)
            if meta.get("inline"):
                out.update(sub)
            elif sub:
                out[meta["key"]] = sub
            continue

        if isinstance(value, Unset):
            continue
        out[meta["key"]] = _raw_from_value(meta, value.value)
    return out


def service_config_from_dict(data: Mapping[str, Any], prefix: str = "") -> ServiceConfig:
    """Lê um `ServiceConfig` (base ou overlay) de um dicionário."""
    config = _struct_from_dict(ServiceConfig, data, prefix.rstrip("."))
    return validate_service_config(config, prefix)


def service_config_to_dict(config: ServiceConfig) -> Dict[str, Any]:
    return _struct_to_dict(config)


def manifest_from_dict(data: Mapping[str, Any]) -> Manifest:
    """
    Materializa um `Manifest` a partir do documento (dict).

    Raises:
        ManifestValidationError: Se identidade, tipos ou valores forem inválidos;
            `details["field_path"]` aponta o campo (ex.: `environments.prod.http.path`).
    """
    if not isinstance(data, Mapping):
        raise _invalid("<root>", data, "manifest deve ser um mapa")

    workload = Workload(
        name=validate_name(data.get("name")),
        type=validate_workload_type(data.get("type")),
    )
    config = service_config_from_dict(data)

    raw_envs = data.get("environments") or {}
    if not isinstance(raw_envs, Mapping):
        raise _invalid("environments", raw_envs, "valor deve ser um mapa")

    environments: Dict[str, ServiceConfig] = {}
    for env_name, overlay in raw_envs.items():
        environments[str(env_name)] = service_config_from_dict(
            overlay or {}, prefix=f"environments.{env_name}."
        )

    return Manifest(workload=workload, config=config, environments=environments)


def manifest_to_dict(manifest: Manifest, *, include_environments: Optional[bool] = None) -> Dict[str, Any]:
    """
    Converte um `Manifest` em documento (dict).

    `include_environments=None` inclui a seção apenas quando há overlays.
    """
    out: Dict[str, Any] = {
        "name": manifest.workload.name,
        "type": manifest.workload.type.value,
    }
    out.update(service_config_to_dict(manifest.config))

    if include_environments is None:
        include_environments = bool(manifest.environments)
    if include_environments:
        out["environments"] = {
            env: service_config_to_dict(manifest.environments[env])
            for env in sorted(manifest.environments)
        }
    return out
