# src/atlas_deploy/core/pipeline/prepare.py
"""
Preparação de um build para um ambiente.

Este módulo encadeia as etapas do core na ordem canônica:

    manifest + ambiente → resolve → hash da configuração resolvida
                        → derive → planejamento de comandos

e registra cada etapa no Event Log do chamador.

Decisões arquiteturais:
    - Falhas são registradas como `build.failed` (payload canônico) e
      propagadas sem retry
    - O hash identifica a configuração resolvida que alimentou o build,
      permitindo reproduzi-lo
    - O ambiente padrão vem dos settings quando não informado

Limites explícitos:
    - Não executa os comandos planejados
    - Não persiste o plano
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..build.commands import build_commands
from ..build.derive import BuildArguments, derive
from ..config.hashing import compute_config_hash
from ..config.settings import DeploySettings, load_settings
from ..errors import payload_from_exception
from ..manifest.codec import manifest_to_dict
from ..manifest.model import Manifest
from ..manifest.resolve import apply_env
from ..traceability.events import EventLog


@dataclass(frozen=True)
class BuildPlan:
    """Resultado imutável da preparação de um build."""

    env_name: str
    manifest: Manifest
    config_hash: str
    build_args: BuildArguments
    commands: List[List[str]]


def prepare_build(
    manifest: Manifest,
    env_name: Optional[str] = None,
    *,
    workspace_root: Union[str, Path],
    uri: str,
    image_tag: str,
    additional_tags: Iterable[str] = (),
    settings: Optional[DeploySettings] = None,
    events: Optional[EventLog] = None,
) -> BuildPlan:
    """
    Resolve o manifest para `env_name` e deriva o plano de build.

    Raises:
        MergeConflictError: Se o overlay divergir estruturalmente da base.
        DerivationPreconditionError: Se faltar um campo exigido pelo deriver.
    """
    if env_name is None:
        env_name = (settings or load_settings()).default_environment
    if events is None:
        events = EventLog(source=manifest.name)

    try:
        resolved = apply_env(manifest, env_name, events=events)
        config_hash = compute_config_hash(manifest_to_dict(resolved))
        build_args = derive(
            resolved.config,
            workspace_root,
            uri=uri,
            image_tag=image_tag,
            additional_tags=additional_tags,
            events=events,
        )
        commands = build_commands(build_args)
    except Exception as exc:
        events.error(
            "build.failed",
            f"Falha ao preparar o build de '{manifest.name}' para '{env_name}'",
            env=env_name,
            error=payload_from_exception(exc, env=env_name).to_dict(),
        )
        raise

    events.info(
        "build.prepared",
        f"Build de '{manifest.name}' preparado para '{env_name}'",
        env=env_name,
        config_hash=config_hash,
    )
    return BuildPlan(
        env_name=env_name,
        manifest=resolved,
        config_hash=config_hash,
        build_args=build_args,
        commands=commands,
    )
