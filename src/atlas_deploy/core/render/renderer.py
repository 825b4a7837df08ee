# src/atlas_deploy/core/render/renderer.py
"""
Renderer canônico de manifests (v1).

Regras:
- O documento é derivado EXCLUSIVAMENTE do `Manifest` recebido.
- Templates são um registro fechado, indexado por nome.
- Mesmo Manifest => mesmos bytes (ordem de chaves estável, cabeçalho fixo).
- Nenhuma escrita em disco acontece aqui (ver `core.manifest.loader.write_manifest`).

Saída:
- bytes UTF-8 de um documento YAML, precedido por um cabeçalho de comentários.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import yaml  # PyYAML

from ..exceptions import ManifestValidationError, TemplateNotFoundError
from ..manifest.codec import manifest_to_dict
from ..manifest.model import Manifest, WorkloadType


LB_WEB_SERVICE_TEMPLATE = "workloads/services/lb-web/manifest.yml"
BACKEND_SERVICE_TEMPLATE = "workloads/services/backend/manifest.yml"


@dataclass(frozen=True)
class ManifestTemplate:
    """Template de documento: cabeçalho e tipo de workload aceito."""

    name: str
    workload_type: WorkloadType
    description: str

    def header(self, manifest: Manifest) -> str:
        return (
            f'# The manifest for the "{manifest.name}" service.\n'
            f'# Type: {self.workload_type.value}. {self.description}\n'
        )


TEMPLATES: Dict[str, ManifestTemplate] = {
    t.name: t
    for t in (
        ManifestTemplate(
            name=LB_WEB_SERVICE_TEMPLATE,
            workload_type=WorkloadType.LOAD_BALANCED_WEB_SERVICE,
            description="Public HTTP service behind a load balancer.",
        ),
        ManifestTemplate(
            name=BACKEND_SERVICE_TEMPLATE,
            workload_type=WorkloadType.BACKEND_SERVICE,
            description="Private service, not reachable from the internet.",
        ),
    )
}


def template_for(workload_type: WorkloadType) -> str:
    """Nome do template de um tipo de workload."""
    for template in TEMPLATES.values():
        if template.workload_type is workload_type:
            return template.name
    raise TemplateNotFoundError(
        message=f"Nenhum template registrado para o tipo '{workload_type.value}'",
        details={"template_name": None, "workload_type": workload_type.value},
    )


def render(manifest: Manifest, template_name: str) -> bytes:
    """
    Renderiza o manifest no documento do template `template_name`.

    Raises:
        TemplateNotFoundError: Se o template não estiver registrado.
        ManifestValidationError: Se o template não for do tipo do workload.
    """
    template = TEMPLATES.get(template_name)
    if template is None:
        raise TemplateNotFoundError(
            message=f"Template não encontrado: {template_name}",
            details={"template_name": template_name},
            hint=f"Templates disponíveis: {', '.join(sorted(TEMPLATES))}",
        )
    if manifest.type is not template.workload_type:
        raise ManifestValidationError(
            message=(
                f"type: template '{template_name}' não aceita workloads do tipo "
                f"'{manifest.type.value}'"
            ),
            details={"field_path": "type", "value": manifest.type.value},
        )

    body = yaml.safe_dump(
        manifest_to_dict(manifest),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    return (template.header(manifest) + "\n" + body).encode("utf-8")
