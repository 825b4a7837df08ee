# src/atlas_deploy/core/manifest/loader.py
"""
Leitura e escrita de manifests em disco.

Este módulo é a fronteira de I/O do manifest: tudo o que acontece entre
a leitura do documento e a escrita dos bytes renderizados é puro.

Decisões arquiteturais:
    - A leitura reutiliza `core.config.loader.load_document` (YAML/JSON)
    - A escrita reutiliza o renderer; o template é escolhido pelo tipo do
      workload quando não informado
    - Erros de I/O são propagados sem retry
    - Um manifest existente não é sobrescrito, a menos que `overwrite=True`
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ..config.loader import load_document
from ..render.renderer import render, template_for
from .codec import manifest_from_dict
from .model import Manifest


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Carrega um manifest de um documento YAML ou JSON.

    Raises:
        DocumentNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um mapa.
        ManifestValidationError: Se o conteúdo for inválido.
    """
    return manifest_from_dict(load_document(path))


def write_manifest(
    manifest: Manifest,
    path: Union[str, Path],
    *,
    template_name: Optional[str] = None,
    overwrite: bool = False,
) -> Path:
    """
    Renderiza e grava o manifest em `path`.

    Returns:
        Path: Caminho gravado.

    Raises:
        FileExistsError: Se o arquivo existir e `overwrite` for falso.
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Manifest já existe: {path}")

    content = render(manifest, template_name or template_for(manifest.type))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
