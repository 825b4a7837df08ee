# src/atlas_deploy/core/manifest/workloads.py
"""
Construtores de manifests por tipo de workload.

Este módulo é o único lugar onde defaults são aplicados: a configuração
base nasce aqui, uma única vez, na criação do workload. O resolver nunca
reaplica defaults.

Despacho por tipo:
    - `WorkloadType` é um enum fechado
    - `_CONSTRUCTORS` mapeia cada membro para exatamente um construtor
    - A completude do mapa é verificada na importação do módulo; um novo
      tipo sem construtor impede o pacote de carregar

Defaults (via `DeploySettings`):
    - cpu = 256, memory = 512, count = 1
    - health check path do load balancer = "/"
    - porta = 80 quando não informada (apenas load-balanced)
    - builder de buildpacks padrão quando nenhum Dockerfile é informado
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from ..config.settings import DeploySettings, load_settings
from ..exceptions import ManifestValidationError
from .model import (
    BuildConfig,
    ContainerHealthCheck,
    ImageConfig,
    Manifest,
    RoutingRule,
    ServiceConfig,
    TaskConfig,
    Workload,
    WorkloadType,
)
from .optional import Value, maybe
from .validate import (
    validate_build_source,
    validate_name,
    validate_port,
    validate_service_config,
    validate_workload_type,
)


@dataclass(frozen=True)
class WorkloadProps:
    """Dados informados na criação de qualquer workload."""

    name: str
    dockerfile: str = ""
    builder: str = ""


@dataclass(frozen=True)
class LoadBalancedWebServiceProps(WorkloadProps):
    port: int = 0
    path: str = "/"


@dataclass(frozen=True)
class BackendServiceProps(WorkloadProps):
    port: int = 0
    health_check: Optional[ContainerHealthCheck] = None


def default_routing_path(name: str, existing: Iterable[Workload]) -> str:
    """
    Path padrão de roteamento de um novo serviço load-balanced.

    O primeiro serviço load-balanced da aplicação recebe "/"; se já
    existir outro, o nome do serviço é usado.
    """
    for workload in existing:
        if workload.type is WorkloadType.LOAD_BALANCED_WEB_SERVICE and workload.name != name:
            return name
    return "/"


def _build_config(props: WorkloadProps, settings: DeploySettings) -> BuildConfig:
    validate_build_source(props.dockerfile, props.builder)
    if props.dockerfile:
        return BuildConfig(dockerfile=Value(props.dockerfile))
    # sem Dockerfile: builder informado ou o builder padrão dos settings
    return BuildConfig(builder=Value(props.builder or settings.default_builder))


def _task_config(settings: DeploySettings) -> TaskConfig:
    return TaskConfig(
        cpu=Value(settings.cpu),
        memory=Value(settings.memory),
        count=Value(settings.count),
    )


def _require_props(props: WorkloadProps, expected: type, kind: WorkloadType) -> None:
    if not isinstance(props, expected):
        raise ManifestValidationError(
            message=(
                f"type: workloads do tipo '{kind.value}' exigem {expected.__name__}, "
                f"recebido: {type(props).__name__}"
            ),
            details={"field_path": "type", "value": kind.value},
        )


def _new_load_balanced_web_service(props: WorkloadProps, settings: DeploySettings) -> ServiceConfig:
    _require_props(props, LoadBalancedWebServiceProps, WorkloadType.LOAD_BALANCED_WEB_SERVICE)
    port = validate_port(props.port or settings.port)
    return ServiceConfig(
        image=ImageConfig(build=_build_config(props, settings), port=Value(port)),
        routing=RoutingRule(
            path=Value(props.path),
            health_check_path=Value(settings.health_check_path),
        ),
        task=_task_config(settings),
    )


def _new_backend_service(props: WorkloadProps, settings: DeploySettings) -> ServiceConfig:
    _require_props(props, BackendServiceProps, WorkloadType.BACKEND_SERVICE)
    port = validate_port(props.port) if props.port else None
    return ServiceConfig(
        image=ImageConfig(
            build=_build_config(props, settings),
            port=maybe(port),
            health_check=maybe(props.health_check),
        ),
        task=_task_config(settings),
    )


_CONSTRUCTORS: Dict[WorkloadType, Callable[[WorkloadProps, DeploySettings], ServiceConfig]] = {
    WorkloadType.LOAD_BALANCED_WEB_SERVICE: _new_load_balanced_web_service,
    WorkloadType.BACKEND_SERVICE: _new_backend_service,
}

_missing = set(WorkloadType) - set(_CONSTRUCTORS)
if _missing:
    raise RuntimeError(f"Tipos de workload sem construtor: {sorted(t.value for t in _missing)}")


def new_manifest(
    workload_type: WorkloadType,
    props: WorkloadProps,
    settings: Optional[DeploySettings] = None,
) -> Manifest:
    """
    Cria o manifest de um novo workload, com defaults aplicados.

    Args:
        workload_type (WorkloadType): Tipo do workload (enum ou valor textual).
        props (WorkloadProps): Props específicas do tipo.
        settings (Optional[DeploySettings]): Settings efetivos; por padrão,
            os defaults embutidos.

    Returns:
        Manifest: Manifest sem overlays.

    Raises:
        ManifestValidationError: Se nome, tipo, porta ou fonte de build forem inválidos,
            ou se `props` não corresponder ao tipo do workload.
    """
    kind = validate_workload_type(workload_type)
    name = validate_name(props.name)
    settings = settings or load_settings()

    config = _CONSTRUCTORS[kind](props, settings)
    validate_service_config(config)
    return Manifest(workload=Workload(name=name, type=kind), config=config)


def add_overlay(manifest: Manifest, env_name: str, overlay: ServiceConfig) -> Manifest:
    """
    Retorna um novo manifest com o overlay de `env_name` adicionado ou substituído.
    """
    if not isinstance(env_name, str) or not env_name:
        raise ManifestValidationError(
            message="environments: nome de ambiente não pode ser vazio",
            details={"field_path": "environments", "value": env_name},
        )
    validate_service_config(overlay, prefix=f"environments.{env_name}.")
    environments = dict(manifest.environments)
    environments[env_name] = overlay
    return Manifest(workload=manifest.workload, config=manifest.config, environments=environments)
