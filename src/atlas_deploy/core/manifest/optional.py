# src/atlas_deploy/core/manifest/optional.py
"""
Campos opcionais tri-state do manifest.

Todo campo mesclável do manifest é um `Opt[T]`, uma soma explícita de
dois casos:

    - `UNSET`     → ausente; herda o valor da base
    - `Value(x)`  → presente; `x` pode ser o valor zero (`""`, `0`, `False`,
                    `{}`, `[]`) e ainda assim sobrescreve a base

Um terceiro estado observável ("presente e vazio") é simplesmente
`Value` com valor zero. `None` nunca é usado como marcador de ausência,
o que elimina a ambiguidade entre "ausente" e "zero".

Além do tipo, este módulo define `MergePolicy`, a política de merge
declarada campo a campo nos dataclasses do manifest (via `metadata`),
e os helpers `opt_field`/`struct_field` usados nessas declarações.

Invariantes:
    - `UNSET` é um singleton, preservado por `copy`/`deepcopy`
    - `Value` é imutável (frozen)
    - Toda declaração de campo carrega exatamente uma `MergePolicy`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Tuple, TypeVar, Union


T = TypeVar("T")


class Unset:
    """Marcador de campo ausente. Use a instância `UNSET`."""

    _instance = None

    def __new__(cls) -> "Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "Unset":
        return self

    def __deepcopy__(self, memo: Any) -> "Unset":
        return self

    def __reduce__(self) -> Tuple[Any, ...]:
        return (Unset, ())


UNSET = Unset()


@dataclass(frozen=True)
class Value(Generic[T]):
    """Valor explicitamente presente (inclusive o valor zero)."""

    value: T


Opt = Union[Unset, Value[T]]


def is_set(opt: Opt[Any]) -> bool:
    return isinstance(opt, Value)


def lookup(opt: Opt[T]) -> Tuple[Any, bool]:
    """Retorna `(valor, presente)`; `(None, False)` quando ausente."""
    if isinstance(opt, Value):
        return opt.value, True
    return None, False


def value_or(opt: Opt[T], default: Any = None) -> Any:
    if isinstance(opt, Value):
        return opt.value
    return default


def maybe(value: Any) -> Opt[Any]:
    """`None` → `UNSET`; qualquer outro valor → `Value`."""
    if value is None:
        return UNSET
    return Value(value)


# ---------------------------------------------------------------------------
# Políticas de merge por campo
# ---------------------------------------------------------------------------

class MergePolicy(str, Enum):
    """
    Política de merge de um campo do manifest.

    - SCALAR: `Opt[escalar]`; presente no overlay → valor do overlay
    - STRUCT: dataclass sempre presente; merge recursivo campo a campo
    - OPTIONAL_STRUCT: `Opt[dataclass]`; presente nos dois lados → recursivo,
      presente só no overlay → valor do overlay
    - MAP: `Opt[dict]`; união chave a chave, entrada do overlay substitui a da base.
      Um mapa vazio presente no overlay (`Value({})`) não remove chaves: a
      união com `{}` mantém as entradas da base. Para remover uma entrada,
      a base precisa ser reconstruída sem ela
    - REPLACE: `Opt[sequência]`; presente no overlay → sequência do overlay inteira
    """

    SCALAR = "scalar"
    STRUCT = "struct"
    OPTIONAL_STRUCT = "optional_struct"
    MAP = "map"
    REPLACE = "replace"


MERGE_METADATA_KEY = "merge"


def opt_field(
    policy: MergePolicy = MergePolicy.SCALAR,
    *,
    key: str,
    kind: Any = None,
    struct: Any = None,
) -> Any:
    """Declara um campo `Opt` (default `UNSET`) com sua política de merge.

    Metadados usados pelo resolver e pelo codec:
        - key: nome do campo no documento persistido
        - kind: tipo Python esperado para escalares e itens de sequência
        - struct: dataclass do valor (OPTIONAL_STRUCT) ou dos itens do mapa (MAP)
    """
    return field(
        default=UNSET,
        metadata={MERGE_METADATA_KEY: policy, "key": key, "kind": kind, "struct": struct},
    )


def struct_field(factory: Callable[[], Any], *, key: str = "", inline: bool = False) -> Any:
    """Declara um sub-struct sempre presente, mesclado recursivamente.

    `inline=True` indica que, no documento persistido, os campos do
    sub-struct aparecem no mesmo nível do struct pai.
    """
    return field(
        default_factory=factory,
        metadata={
            MERGE_METADATA_KEY: MergePolicy.STRUCT,
            "key": key,
            "inline": inline,
            "struct": factory,
        },
    )
