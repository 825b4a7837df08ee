# src/atlas_deploy/core/manifest/validate.py
"""
Validação de valores do manifest antes da resolução.

Regras (v1):
    - nome do workload: não vazio, até 255 caracteres, `^[a-z][a-z0-9\\-]+$`
    - tipo do workload: membro de `WorkloadType`
    - porta: inteiro entre 1 e 65535
    - Dockerfile e builder são mutuamente exclusivos
    - cpu, memory e count: inteiros não negativos quando presentes

Toda falha é um `ManifestValidationError` com `field_path` e o valor
recebido. A validação nunca corrige valores.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Tuple

from ..exceptions import ManifestValidationError
from .model import ServiceConfig, WorkloadType
from .optional import lookup


MAX_NAME_LENGTH = 255
MIN_PORT = 1
MAX_PORT = 65535

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9\-]+$")


def _invalid(field_path: str, value: Any, message: str, hint: Optional[str] = None) -> ManifestValidationError:
    return ManifestValidationError(
        message=f"{field_path}: {message}",
        details={"field_path": field_path, "value": value},
        hint=hint,
    )


def validate_name(name: Any, field_path: str = "name") -> str:
    if not isinstance(name, str) or name == "":
        raise _invalid(field_path, name, "valor não pode ser vazio")
    if len(name) > MAX_NAME_LENGTH:
        raise _invalid(field_path, name, f"valor não pode exceder {MAX_NAME_LENGTH} caracteres")
    if not _NAME_PATTERN.match(name):
        raise _invalid(
            field_path,
            name,
            "valor deve começar com uma letra e conter apenas letras minúsculas, números e hífens",
        )
    return name


def validate_port(port: Any, field_path: str = "image.port") -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise _invalid(field_path, port, "porta deve ser um inteiro")
    if not MIN_PORT <= port <= MAX_PORT:
        raise _invalid(field_path, port, f"porta deve estar no intervalo {MIN_PORT}-{MAX_PORT}")
    return port


def validate_workload_type(value: Any, field_path: str = "type") -> WorkloadType:
    if isinstance(value, WorkloadType):
        return value
    try:
        return WorkloadType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in WorkloadType)
        raise _invalid(field_path, value, f"tipo de workload inválido, deve ser um de: {allowed}") from None


def validate_build_source(dockerfile: str, builder: str, field_path: str = "image.build") -> None:
    if dockerfile and builder:
        raise _invalid(
            field_path,
            {"dockerfile": dockerfile, "builder": builder},
            "não é possível definir Dockerfile e builder de buildpacks ao mesmo tempo",
            hint="Escolha apenas um modo de build.",
        )


def _non_negative(pairs: Iterable[Tuple[str, Any]]) -> None:
    for field_path, opt in pairs:
        value, present = lookup(opt)
        if not present:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise _invalid(field_path, value, "valor deve ser um inteiro não negativo")


def validate_service_config(config: ServiceConfig, prefix: str = "") -> ServiceConfig:
    """
    Valida uma configuração base ou um overlay.

    `prefix` é anteposto aos caminhos de campo (ex.: `environments.prod.`),
    para que o erro aponte a entrada exata do overlay.
    """
    port, present = lookup(config.image.port)
    if present:
        validate_port(port, f"{prefix}image.port")

    dockerfile, _ = lookup(config.image.build.dockerfile)
    builder, _ = lookup(config.image.build.builder)
    validate_build_source(dockerfile or "", builder or "", f"{prefix}image.build")

    _non_negative(
        [
            (f"{prefix}cpu", config.task.cpu),
            (f"{prefix}memory", config.task.memory),
            (f"{prefix}count", config.task.count),
        ]
    )

    return config
