# src/atlas_deploy/core/config/hashing.py
"""
Hashing canônico de documentos do Atlas Deploy.

O hash representa a identidade estrutural de um dicionário (settings ou
configuração resolvida serializada) e é utilizado para identificar, de
forma reprodutível, qual configuração alimentou um build.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256, hexadecimal

Invariantes:
    - Dicionários estruturalmente equivalentes produzem o mesmo hash,
      independentemente da ordem de inserção das chaves
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash SHA-256 determinístico de um dicionário.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
