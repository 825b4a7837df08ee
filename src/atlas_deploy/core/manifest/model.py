# src/atlas_deploy/core/manifest/model.py
"""
Modelo tipado do manifest de um workload.

Este módulo define a representação canônica da configuração de um
workload conteinerizado e de seus overlays por ambiente.

Estrutura:
    - Workload         → identidade imutável (nome e tipo)
    - ServiceConfig    → configuração mesclável (imagem, roteamento, task,
                         logging, sidecars)
    - Manifest         → identidade + configuração base + overlays por ambiente

Um overlay é um `ServiceConfig` em que todos os campos começam `UNSET`;
a configuração base é um `ServiceConfig` construído uma única vez, com
defaults explícitos (ver `core.manifest.workloads`).

Decisões arquiteturais:
    - Todo campo mesclável é `Opt[T]` (ver `core.manifest.optional`)
    - A política de merge é declarada campo a campo em `metadata`
    - Todos os dataclasses são frozen; resolução sempre produz novos valores
    - A única sequência do modelo (`ContainerHealthCheck.command`) é
      substituída integralmente quando presente no overlay

Invariantes:
    - `Workload` nunca participa do merge
    - Nenhum campo usa `None` como marcador de ausência

Limites explícitos:
    - Não valida valores (ver `core.manifest.validate`)
    - Não lê nem escreve documentos (ver `core.manifest.codec`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .optional import MergePolicy, Opt, opt_field, struct_field


class WorkloadType(str, Enum):
    """
    Tipos de workload suportados (conjunto fechado).

    Os valores textuais são os nomes persistidos no campo `type` do
    documento do manifest.
    """

    LOAD_BALANCED_WEB_SERVICE = "Load Balanced Web Service"
    BACKEND_SERVICE = "Backend Service"


@dataclass(frozen=True)
class Workload:
    """Identidade do workload. Nunca é tocada por overlays."""

    name: str
    type: WorkloadType


@dataclass(frozen=True)
class BuildConfig:
    """Como construir a imagem: Dockerfile ou builder de buildpacks."""

    dockerfile: Opt[str] = opt_field(key="dockerfile", kind=str)
    context: Opt[str] = opt_field(key="context", kind=str)
    args: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="args", kind=str)
    builder: Opt[str] = opt_field(key="builder", kind=str)
    env: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="env", kind=str)


@dataclass(frozen=True)
class ContainerHealthCheck:
    """Health check do container (serviços backend)."""

    command: Opt[List[str]] = opt_field(MergePolicy.REPLACE, key="command", kind=str)
    interval: Opt[str] = opt_field(key="interval", kind=str)
    timeout: Opt[str] = opt_field(key="timeout", kind=str)
    start_period: Opt[str] = opt_field(key="start_period", kind=str)
    retries: Opt[int] = opt_field(key="retries", kind=int)


@dataclass(frozen=True)
class ImageConfig:
    build: BuildConfig = struct_field(BuildConfig, key="build")
    location: Opt[str] = opt_field(key="location", kind=str)
    port: Opt[int] = opt_field(key="port", kind=int)
    health_check: Opt[ContainerHealthCheck] = opt_field(
        MergePolicy.OPTIONAL_STRUCT, key="healthcheck", struct=ContainerHealthCheck
    )


@dataclass(frozen=True)
class RoutingRule:
    """Regra de roteamento HTTP do load balancer."""

    path: Opt[str] = opt_field(key="path", kind=str)
    health_check_path: Opt[str] = opt_field(key="healthcheck", kind=str)
    stickiness: Opt[bool] = opt_field(key="stickiness", kind=bool)
    # container que recebe o tráfego do load balancer
    target_container: Opt[str] = opt_field(key="targetContainer", kind=str)


@dataclass(frozen=True)
class TaskConfig:
    cpu: Opt[int] = opt_field(key="cpu", kind=int)
    memory: Opt[int] = opt_field(key="memory", kind=int)
    count: Opt[int] = opt_field(key="count", kind=int)
    variables: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="variables", kind=str)
    secrets: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="secrets", kind=str)


@dataclass(frozen=True)
class LoggingConfig:
    """Configuração de roteamento de logs (sidecar de log)."""

    image: Opt[str] = opt_field(key="image", kind=str)
    destination: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="destination", kind=str)
    enable_metadata: Opt[bool] = opt_field(key="enableMetadata", kind=bool)
    secret_options: Opt[Dict[str, str]] = opt_field(MergePolicy.MAP, key="secretOptions", kind=str)
    config_file: Opt[str] = opt_field(key="configFilePath", kind=str)


@dataclass(frozen=True)
class SidecarConfig:
    port: Opt[str] = opt_field(key="port", kind=str)
    image: Opt[str] = opt_field(key="image", kind=str)
    credentials_parameter: Opt[str] = opt_field(key="credentialsParameter", kind=str)


@dataclass(frozen=True)
class ServiceConfig:
    """
    Configuração mesclável de um serviço.

    Usada tanto para a configuração base quanto para overlays e para a
    configuração resolvida. Em um overlay, qualquer campo pode estar `UNSET`.
    """

    image: ImageConfig = struct_field(ImageConfig, key="image")
    routing: RoutingRule = struct_field(RoutingRule, key="http")
    task: TaskConfig = struct_field(TaskConfig, inline=True)
    logging: Opt[LoggingConfig] = opt_field(
        MergePolicy.OPTIONAL_STRUCT, key="logging", struct=LoggingConfig
    )
    sidecars: Opt[Dict[str, SidecarConfig]] = opt_field(
        MergePolicy.MAP, key="sidecars", struct=SidecarConfig
    )


@dataclass(frozen=True)
class Manifest:
    """
    Manifest completo de um workload.

    Campos:
        - workload: identidade imutável
        - config: configuração base
        - environments: overlays por nome de ambiente
    """

    workload: Workload
    config: ServiceConfig = field(default_factory=ServiceConfig)
    environments: Dict[str, ServiceConfig] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.workload.name

    @property
    def type(self) -> WorkloadType:
        return self.workload.type
