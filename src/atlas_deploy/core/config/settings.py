# src/atlas_deploy/core/config/settings.py
"""
Settings do Atlas Deploy.

Os settings são resolvidos a partir de:
    - defaults embutidos (`DEFAULT_SETTINGS`, obrigatórios)
    - um documento local de overrides (opcional, YAML ou JSON)

Eles alimentam os construtores de workload (defaults de CPU, memória,
contagem de tasks, health check e porta) e a preparação de builds
(builder padrão, ambiente padrão).

Invariantes:
    - Os defaults embutidos nunca são mutados
    - O documento local, quando presente, sempre tem prioridade
    - A mesma entrada sempre produz os mesmos settings

Limites explícitos:
    - Settings não são aplicados durante a resolução de overlays; defaults
      pertencem à configuração base, criada uma única vez
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import InvalidConfigRootTypeError
from .hashing import compute_config_hash
from .loader import load_document
from .merge import deep_merge


DEFAULT_SETTINGS: Dict[str, Any] = {
    "manifest": {
        "cpu": 256,
        "memory": 512,
        "count": 1,
        "health_check_path": "/",
        "port": 80,
    },
    "build": {
        "default_builder": "paketobuildpacks/builder:full",
    },
    "deploy": {
        "default_environment": "test",
    },
}


@dataclass(frozen=True)
class DeploySettings:
    """Settings efetivos (defaults embutidos + overrides locais)."""

    cpu: int
    memory: int
    count: int
    health_check_path: str
    port: int
    default_builder: str
    default_environment: str
    settings_hash: str


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if not isinstance(section, dict):
        raise InvalidConfigRootTypeError(
            f"Seção '{name}' dos settings deve ser dict, recebido: {type(section).__name__}"
        )
    return section


def settings_from_dict(data: Dict[str, Any]) -> DeploySettings:
    """Materializa `DeploySettings` a partir de um dicionário já mesclado."""
    manifest = _section(data, "manifest")
    build = _section(data, "build")
    deploy = _section(data, "deploy")
    return DeploySettings(
        cpu=manifest["cpu"],
        memory=manifest["memory"],
        count=manifest["count"],
        health_check_path=manifest["health_check_path"],
        port=manifest["port"],
        default_builder=build["default_builder"],
        default_environment=deploy["default_environment"],
        settings_hash=compute_config_hash(data),
    )


def load_settings(local_path: Optional[Union[str, Path]] = None) -> DeploySettings:
    """
    Resolve os settings efetivos.

    Política de resolução:
        - Defaults embutidos são sempre a base
        - O documento local é opcional; um caminho inexistente é ignorado
        - Quando presente, o documento local é aplicado via `deep_merge`

    Raises:
        UnsupportedConfigFormatError: Se o formato do documento local não for suportado.
        InvalidConfigRootTypeError: Se o documento local não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    effective = DEFAULT_SETTINGS

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(DEFAULT_SETTINGS, load_document(local_file))

    return settings_from_dict(effective)
