# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Deploy.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos de manifest semelhantes ao uso real (YAML como string)
- configurações base construídas pelos construtores canônicos
- overlays por ambiente para exercitar o resolver

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O (testes de disco usam `tmp_path`)
    - Cada teste recebe instâncias próprias

Este módulo existe como infraestrutura de teste e não
como validação funcional do núcleo.
"""

import pytest


@pytest.fixture
def lb_manifest_yaml() -> str:
    """
    Fixture que fornece um manifest YAML de serviço load-balanced com overlays.

    O documento cobre as três formas de um campo opcional:
        - ausente (herda da base)
        - presente e vazio (`http.path: ""` em prod)
        - presente com valor

    Returns:
        str: Conteúdo YAML do manifest.
    """
    return """\
name: frontend
type: Load Balanced Web Service
image:
  build:
    dockerfile: frontend/Dockerfile
    args:
      GIT_SHA: abc123
  port: 8080
http:
  path: /
  healthcheck: /
cpu: 256
memory: 512
count: 1
variables:
  LOG_LEVEL: info
sidecars:
  nginx:
    port: 80
    image: nginx:1.25
environments:
  prod:
    cpu: 512
    count: 3
    http:
      path: ""
    sidecars:
      nginx:
        image: nginx:1.26
      redis:
        port: "6379"
        image: redis:7
  staging: {}
"""


@pytest.fixture
def settings():
    """Settings embutidos (sem documento local)."""
    from atlas_deploy.core.config.settings import load_settings

    return load_settings()


@pytest.fixture
def lb_manifest(settings):
    """
    Manifest de serviço load-balanced criado pelo construtor canônico.

    Defaults aplicados: cpu=256, memory=512, count=1, healthcheck="/".
    """
    from atlas_deploy.core.manifest.model import WorkloadType
    from atlas_deploy.core.manifest.workloads import LoadBalancedWebServiceProps, new_manifest

    return new_manifest(
        WorkloadType.LOAD_BALANCED_WEB_SERVICE,
        LoadBalancedWebServiceProps(name="frontend", dockerfile="frontend/Dockerfile", port=8080),
        settings,
    )


@pytest.fixture
def backend_manifest(settings):
    """Manifest de serviço backend com builder de buildpacks."""
    from atlas_deploy.core.manifest.model import WorkloadType
    from atlas_deploy.core.manifest.workloads import BackendServiceProps, new_manifest

    return new_manifest(
        WorkloadType.BACKEND_SERVICE,
        BackendServiceProps(name="worker", builder="paketobuildpacks/builder:full"),
        settings,
    )
