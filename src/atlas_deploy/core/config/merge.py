# src/atlas_deploy/core/config/merge.py
"""
Deep-merge de dicionários de settings.

Este módulo implementa a política de deep-merge utilizada pelo Atlas
Deploy para combinar os settings embutidos (defaults) com um documento
local de overrides.

Ele opera sobre dicionários puros. O merge tipado de manifests, com
semântica tri-state, vive em `core.manifest.resolve`.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito, com caminho da chave

Invariantes:
    - Nenhum input é mutado durante o processo
    - Chaves não sobrescritas são preservadas
    - Conflitos estruturais interrompem o merge
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def _dotted(path: Tuple[str, ...]) -> str:
    return ".".join(path) if path else "<root>"


def deep_merge(
    base: Dict[str, Any],
    override: Dict[str, Any],
    _path: Tuple[str, ...] = (),
) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Args:
        base (Dict[str, Any]): Settings base (ex.: defaults embutidos).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Novo dicionário resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis;
            a mensagem inclui o caminho pontuado da chave.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts em '{_dotted(_path)}', recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]
        path = _path + (str(key),)

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value, path)
            continue

        if isinstance(base_value, list) and isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # bool é subclasse de int, mas não é intercambiável em settings
        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{_dotted(path)}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
