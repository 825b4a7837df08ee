"""
Atlas Deploy — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Atlas Deploy.

Objetivo:
- Permitir que o manifest, o resolver e o deriver levantem exceções semânticas
- Facilitar o mapeamento determinístico para AtlasErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Toda falha aponta o caminho do campo (`field_path`) e, quando aplicável,
  o ambiente (`env`) envolvido.
- Nenhuma exceção deste módulo é recuperável por retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from .errors import (
    AtlasErrorPayload,
    DERIVATION_PRECONDITION,
    MANIFEST_VALIDATION_ERROR,
    MERGE_CONFLICT,
    TEMPLATE_NOT_FOUND,
    UNEXPECTED_ERROR,
)


@dataclass(frozen=True, eq=False)
class AtlasException(Exception):
    """Base class para exceções internas do Atlas.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    code: ClassVar[str] = UNEXPECTED_ERROR

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_payload(self) -> AtlasErrorPayload:
        return AtlasErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ManifestValidationError(AtlasException):
    """Valor malformado fornecido ao manifest antes da resolução."""

    code: ClassVar[str] = MANIFEST_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Resolução de overlays
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class MergeConflictError(AtlasException):
    """Base e overlay discordam de forma estrutural no mesmo caminho de campo.

    Indica um bug de construção do schema; nunca é um erro de usuário.
    """

    code: ClassVar[str] = MERGE_CONFLICT


# ---------------------------------------------------------------------------
# Derivação de build
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class DerivationPreconditionError(AtlasException):
    """Configuração resolvida sem um campo que o deriver assume resolvido."""

    code: ClassVar[str] = DERIVATION_PRECONDITION


# ---------------------------------------------------------------------------
# Renderização
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class TemplateNotFoundError(AtlasException):
    """Template de documento não registrado."""

    code: ClassVar[str] = TEMPLATE_NOT_FOUND
