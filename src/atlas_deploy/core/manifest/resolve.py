# src/atlas_deploy/core/manifest/resolve.py
"""
Resolver de overrides por ambiente.

Este módulo implementa o merge tipado entre a configuração base de um
workload e o overlay de um ambiente, produzindo a configuração resolvida
consumida pelo deriver de build e pelo renderer.

Política de merge (v1), declarada campo a campo em `metadata`:
    - SCALAR          → overlay `UNSET` mantém a base; `Value` (inclusive zero) sobrescreve
    - STRUCT          → merge recursivo campo a campo
    - OPTIONAL_STRUCT → recursivo se presente nos dois lados; senão vence quem estiver presente
    - MAP             → união chave a chave; a entrada do overlay substitui a da base
                        (mapa vazio no overlay mantém as chaves da base)
    - REPLACE         → sequência do overlay substitui a da base integralmente

Decisões arquiteturais:
    - Copy-on-read: base e overlay são copiados antes do merge
    - Ambiente sem overlay não é erro; a base é devolvida (cópia)
    - Divergência estrutural é `MergeConflictError`, com caminho e ambiente
    - Defaults nunca são aplicados aqui; pertencem à configuração base

Invariantes:
    - `base` e overlays nunca são mutados
    - A mesma entrada sempre produz a mesma saída
    - Nenhum estado é compartilhado entre chamadas; chamadas concorrentes
      sobre a mesma base são seguras

Limites explícitos:
    - Não valida semântica de valores
    - Não lê documentos nem realiza I/O
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, List, Mapping, Optional, Tuple

from ..exceptions import MergeConflictError
from ..traceability.events import EventLog
from .model import Manifest, ServiceConfig
from .optional import MERGE_METADATA_KEY, MergePolicy, Opt, Unset, Value


@dataclass
class _MergeState:
    env: str
    overridden: List[str] = field(default_factory=list)


def _dotted(path: Tuple[str, ...]) -> str:
    return ".".join(path) if path else "<root>"


def _unwrap(opt: Any) -> Any:
    return opt.value if isinstance(opt, Value) else opt


def _conflict(state: _MergeState, path: Tuple[str, ...], base: Any, overlay: Any, reason: str) -> MergeConflictError:
    return MergeConflictError(
        message=(
            f"Conflito estrutural em '{_dotted(path)}' no ambiente '{state.env}': {reason}"
        ),
        details={
            "field_path": _dotted(path),
            "env": state.env,
            "base_type": type(_unwrap(base)).__name__,
            "overlay_type": type(_unwrap(overlay)).__name__,
        },
        hint="O overlay deve ter a mesma forma da configuração base; revise quem construiu o overlay.",
    )


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple, set)) or is_dataclass(value)


def _shape_error(policy: MergePolicy, opt: Opt[Any], item_type: Any) -> Optional[str]:
    """Motivo da incompatibilidade entre `opt` e a política, ou `None`."""
    if isinstance(opt, Unset):
        return None
    if not isinstance(opt, Value):
        return "campo não é Opt (UNSET/Value)"

    value = opt.value
    if policy is MergePolicy.SCALAR:
        ok = not _is_container(value)
    elif policy is MergePolicy.REPLACE:
        ok = isinstance(value, (list, tuple))
    elif policy is MergePolicy.MAP:
        ok = isinstance(value, Mapping)
        if ok and item_type is not None:
            ok = all(isinstance(item, item_type) for item in value.values())
    elif policy is MergePolicy.OPTIONAL_STRUCT:
        ok = isinstance(value, item_type)
    else:
        ok = False
    if ok:
        return None
    return f"valor {type(value).__name__} incompatível com a política '{policy.value}'"


def _merge_opt(
    policy: MergePolicy,
    item_type: Any,
    base: Opt[Any],
    overlay: Opt[Any],
    path: Tuple[str, ...],
    state: _MergeState,
) -> Opt[Any]:
    for side in (base, overlay):
        reason = _shape_error(policy, side, item_type)
        if reason is not None:
            raise _conflict(state, path, base, overlay, reason)

    if isinstance(overlay, Unset):
        return base

    if policy is MergePolicy.OPTIONAL_STRUCT and isinstance(base, Value):
        return Value(_merge_struct(base.value, overlay.value, path, state))

    state.overridden.append(_dotted(path))

    if policy is MergePolicy.MAP and isinstance(base, Value):
        merged = dict(base.value)
        merged.update(overlay.value)
        return Value(merged)

    if policy is MergePolicy.REPLACE:
        return Value(list(overlay.value))

    return overlay


def _merge_struct(base: Any, overlay: Any, path: Tuple[str, ...], state: _MergeState) -> Any:
    if not is_dataclass(base) or type(base) is not type(overlay):
        raise _conflict(state, path, base, overlay, "structs de tipos diferentes")

    changes = {}
    for f in fields(base):
        policy = f.metadata.get(MERGE_METADATA_KEY)
        field_path = path + (f.name,)
        if policy is None:
            raise _conflict(state, field_path, base, overlay, "campo sem política de merge declarada")

        base_value = getattr(base, f.name)
        overlay_value = getattr(overlay, f.name)

        if policy is MergePolicy.STRUCT:
            changes[f.name] = _merge_struct(base_value, overlay_value, field_path, state)
        else:
            changes[f.name] = _merge_opt(
                policy, f.metadata.get("struct"), base_value, overlay_value, field_path, state
            )

    return replace(base, **changes)


def resolve(
    base: ServiceConfig,
    overlays_by_env: Mapping[str, ServiceConfig],
    env_name: str,
    *,
    events: Optional[EventLog] = None,
) -> ServiceConfig:
    """
    Resolve a configuração efetiva de `env_name`.

    Args:
        base (ServiceConfig): Configuração base do workload.
        overlays_by_env (Mapping[str, ServiceConfig]): Overlays por ambiente.
        env_name (str): Ambiente alvo.
        events (Optional[EventLog]): Event Log opcional do chamador.

    Returns:
        ServiceConfig: Nova configuração resolvida, independente de `base`
        e do overlay (nenhum objeto mutável é compartilhado).

    Raises:
        MergeConflictError: Se base e overlay divergirem estruturalmente.
    """
    resolved_base = deepcopy(base)

    if env_name not in overlays_by_env:
        if events is not None:
            events.info(
                "overlay.missing",
                f"Ambiente '{env_name}' sem overlay; configuração base mantida",
                env=env_name,
            )
        return resolved_base

    overlay = deepcopy(overlays_by_env[env_name])
    state = _MergeState(env=env_name)
    resolved = _merge_struct(resolved_base, overlay, (), state)

    if events is not None:
        events.info(
            "overlay.applied",
            f"Overlay do ambiente '{env_name}' aplicado",
            env=env_name,
            overridden=list(state.overridden),
        )
    return resolved


def apply_env(manifest: Manifest, env_name: str, *, events: Optional[EventLog] = None) -> Manifest:
    """
    Retorna o manifest com o overlay de `env_name` aplicado.

    A identidade do workload é preservada; o manifest retornado não
    carrega overlays (`environments` vazio).
    """
    config = resolve(manifest.config, manifest.environments, env_name, events=events)
    return Manifest(workload=manifest.workload, config=config, environments={})
