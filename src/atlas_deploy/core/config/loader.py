# src/atlas_deploy/core/config/loader.py
"""
Leitura canônica de documentos YAML/JSON do Atlas Deploy.

Este módulo é a fronteira de I/O compartilhada pelos settings e pelo
loader de manifests: lê um arquivo do disco e valida os requisitos
estruturais mínimos antes que qualquer interpretação aconteça.

Formatos suportados (v1):
    - YAML (.yaml, .yml)
    - JSON (.json)

Decisões arquiteturais:
    - O arquivo deve existir no momento da leitura
    - O conteúdo raiz deve ser um dicionário (`dict`)
    - Arquivos vazios são interpretados como dicionários vazios
    - Erros de I/O não são reintentados

Limites explícitos:
    - Não realiza merge
    - Não interpreta o conteúdo (settings ou manifest)
"""

from pathlib import Path
from typing import Any, Dict, Union
import json

import yaml  # PyYAML

from .errors import (
    DocumentNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Carrega um documento YAML ou JSON e valida seu tipo raiz.

    Args:
        path (Union[str, Path]): Caminho para o documento.

    Returns:
        Dict[str, Any]: Conteúdo do documento como dicionário.

    Raises:
        DocumentNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    path = Path(path)
    if not path.exists():
        raise DocumentNotFoundError(f"Documento não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Raiz do documento deve ser dict, recebido: {type(data).__name__} ({path})"
        )

    return data
