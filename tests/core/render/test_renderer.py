# tests/core/render/test_renderer.py
"""
Testes do renderer de manifests.

Os testes asseguram que:
- o documento é derivado exclusivamente do Manifest recebido
- o mesmo Manifest produz os mesmos bytes
- templates desconhecidos e tipos incompatíveis falham de forma tipada
"""

import pytest
import yaml

from atlas_deploy.core.exceptions import ManifestValidationError, TemplateNotFoundError
from atlas_deploy.core.manifest.codec import manifest_to_dict
from atlas_deploy.core.manifest.model import RoutingRule, ServiceConfig
from atlas_deploy.core.manifest.optional import Value
from atlas_deploy.core.manifest.resolve import apply_env
from atlas_deploy.core.manifest.workloads import add_overlay
from atlas_deploy.core.render.renderer import (
    BACKEND_SERVICE_TEMPLATE,
    LB_WEB_SERVICE_TEMPLATE,
    TEMPLATES,
    render,
    template_for,
)


def test_render_is_deterministic(lb_manifest):
    assert render(lb_manifest, LB_WEB_SERVICE_TEMPLATE) == render(lb_manifest, LB_WEB_SERVICE_TEMPLATE)


def test_render_header_and_body(lb_manifest):
    out = render(lb_manifest, LB_WEB_SERVICE_TEMPLATE)

    assert isinstance(out, bytes)
    text = out.decode("utf-8")
    lines = text.splitlines()
    assert lines[0] == '# The manifest for the "frontend" service.'
    assert lines[1].startswith("# Type: Load Balanced Web Service.")
    assert yaml.safe_load(text) == manifest_to_dict(lb_manifest)
    assert text.index("name:") < text.index("type:") < text.index("image:")


def test_render_resolved_manifest_keeps_empty_path(lb_manifest):
    manifest = add_overlay(lb_manifest, "prod", ServiceConfig(routing=RoutingRule(path=Value(""))))

    doc = yaml.safe_load(render(apply_env(manifest, "prod"), LB_WEB_SERVICE_TEMPLATE))

    assert doc["http"]["path"] == ""
    assert "environments" not in doc


def test_unknown_template(lb_manifest):
    with pytest.raises(TemplateNotFoundError) as exc:
        render(lb_manifest, "workloads/jobs/scheduled/manifest.yml")
    assert exc.value.details == {"template_name": "workloads/jobs/scheduled/manifest.yml"}
    assert LB_WEB_SERVICE_TEMPLATE in exc.value.hint


def test_template_must_match_workload_type(backend_manifest):
    with pytest.raises(ManifestValidationError) as exc:
        render(backend_manifest, LB_WEB_SERVICE_TEMPLATE)
    assert exc.value.details["field_path"] == "type"


def test_every_workload_type_has_a_template(lb_manifest, backend_manifest):
    assert template_for(lb_manifest.type) == LB_WEB_SERVICE_TEMPLATE
    assert template_for(backend_manifest.type) == BACKEND_SERVICE_TEMPLATE
    assert {t.workload_type for t in TEMPLATES.values()} == {lb_manifest.type, backend_manifest.type}
