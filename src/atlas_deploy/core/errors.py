"""
Atlas Deploy — Canonical Error Structures (v1)

Este módulo define o padrão canônico de payloads de erro do Atlas Deploy.
Erros são artefatos de diagnóstico e fazem parte do contrato operacional
do sistema, devendo ser:

- explícitos
- serializáveis
- rastreáveis até o campo ou ambiente envolvido

Nenhum retry ou fallback é decidido aqui.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AtlasErrorPayload:
    """
    Payload canônico de erro do Atlas Deploy.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados (ex.: `field_path`, `env`)
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Manifest
MANIFEST_VALIDATION_ERROR = "MANIFEST_VALIDATION_ERROR"

# Resolução de overlays
MERGE_CONFLICT = "MERGE_CONFLICT"

# Derivação de build
DERIVATION_PRECONDITION = "DERIVATION_PRECONDITION"

# Renderização
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"

# Falhas não catalogadas
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def unexpected_error(
    *,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    env: Optional[str] = None,
    hint: str = "Verifique o stacktrace para diagnosticar a falha. Nenhum retry é aplicado automaticamente.",
) -> AtlasErrorPayload:
    return AtlasErrorPayload(
        type=UNEXPECTED_ERROR,
        message="Falha inesperada durante a preparação do build",
        details={
            "exc_type": exc_type,
            "exc_message": exc_message,
            "env": env,
        },
        hint=hint,
    )


def payload_from_exception(exc: BaseException, *, env: Optional[str] = None) -> AtlasErrorPayload:
    """
    Converte qualquer exceção em payload canônico.

    Exceções tipadas do Atlas (`AtlasException`) carregam seu próprio
    código; as demais são encapsuladas como `UNEXPECTED_ERROR`.
    """
    # import local: exceptions depende deste módulo
    from .exceptions import AtlasException

    if isinstance(exc, AtlasException):
        return exc.to_payload()
    return unexpected_error(
        exc_type=type(exc).__name__,
        exc_message=str(exc),
        env=env,
    )
