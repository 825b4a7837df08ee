# tests/core/manifest/test_resolve.py
"""
Testes do resolver de overrides por ambiente.

Este módulo valida o merge tipado entre a configuração base de um
workload e o overlay de um ambiente.

Os testes asseguram que:
- campos ausentes no overlay herdam o valor da base
- campos presentes (inclusive vazios) sobrescrevem a base
- mapas são mesclados chave a chave
- sequências são substituídas integralmente
- base e overlay nunca são mutados
- divergências estruturais falham com caminho e ambiente

Decisões arquiteturais:
    - O resolver é puro; eventos só são emitidos quando um EventLog é fornecido
    - Um ambiente sem overlay não é erro

Limites explícitos:
    - Não valida leitura de documentos (ver test_codec.py)
    - Não valida derivação de build
"""

import copy
import threading

import pytest

try:
    from atlas_deploy.core.exceptions import MergeConflictError
    from atlas_deploy.core.manifest.model import (
        BuildConfig,
        ContainerHealthCheck,
        ImageConfig,
        LoggingConfig,
        RoutingRule,
        ServiceConfig,
        SidecarConfig,
        TaskConfig,
    )
    from atlas_deploy.core.manifest.optional import UNSET, Value
    from atlas_deploy.core.manifest.resolve import apply_env, resolve
    from atlas_deploy.core.traceability.events import EventLog
except Exception as e:  # noqa: BLE001
    resolve = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o resolver e o modelo tipado estejam disponíveis para os testes.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing overlay resolver modules. Implement:\n"
            "- src/atlas_deploy/core/manifest/resolve.py (resolve, apply_env)\n"
            "- src/atlas_deploy/core/manifest/model.py (ServiceConfig e sub-structs)\n"
            "- src/atlas_deploy/core/manifest/optional.py (UNSET, Value)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _base() -> "ServiceConfig":
    return ServiceConfig(
        image=ImageConfig(
            build=BuildConfig(
                dockerfile=Value("frontend/Dockerfile"),
                args=Value({"GIT_SHA": "abc123", "NODE_ENV": "production"}),
            ),
            port=Value(8080),
        ),
        routing=RoutingRule(path=Value("/"), health_check_path=Value("/healthz")),
        task=TaskConfig(
            cpu=Value(256),
            memory=Value(512),
            count=Value(1),
            variables=Value({"LOG_LEVEL": "info"}),
        ),
        sidecars=Value({"nginx": SidecarConfig(port=Value("80"), image=Value("nginx:1.25"))}),
    )


# ---------------------------------------------------------------------------
# Exemplos canônicos
# ---------------------------------------------------------------------------

def test_scalar_override_keeps_unset_fields():
    """
    base {cpu=256, memory=512, count=1} + overlay prod {cpu=512}
    → {cpu=512, memory=512, count=1}
    """
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(cpu=Value(512)))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.task.cpu == Value(512)
    assert out.task.memory == Value(512)
    assert out.task.count == Value(1)


def test_explicit_empty_string_clears_base_value():
    """
    base {path="/"} + overlay prod {path=""} → path == "" (não "/").
    """
    _require_imports()
    overlay = ServiceConfig(routing=RoutingRule(path=Value("")))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.routing.path == Value("")
    assert out.routing.health_check_path == Value("/healthz")


def test_sidecar_map_merges_key_by_key():
    """
    base {"nginx": X} + overlay {"nginx": Y, "redis": Z} → {"nginx": Y, "redis": Z}.
    """
    _require_imports()
    y = SidecarConfig(image=Value("nginx:1.26"))
    z = SidecarConfig(port=Value("6379"), image=Value("redis:7"))
    overlay = ServiceConfig(sidecars=Value({"nginx": y, "redis": z}))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.sidecars == Value({"nginx": y, "redis": z})


def test_map_keys_absent_in_overlay_are_retained():
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(variables=Value({"FEATURE_X": "on"})))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.task.variables == Value({"LOG_LEVEL": "info", "FEATURE_X": "on"})
    assert out.sidecars == _base().sidecars


def test_map_set_only_in_overlay_is_taken():
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(secrets=Value({"DB_PASSWORD": "/app/db"})))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.task.secrets == Value({"DB_PASSWORD": "/app/db"})


def test_explicit_empty_map_keeps_base_entries():
    """Mapa vazio presente no overlay não remove chaves da base (união)."""
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(variables=Value({})))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.task.variables == Value({"LOG_LEVEL": "info"})


# ---------------------------------------------------------------------------
# Identidade, profundidade e zero-values
# ---------------------------------------------------------------------------

def test_empty_overlay_is_identity():
    _require_imports()
    base = _base()
    assert resolve(base, {"prod": ServiceConfig()}, "prod") == base


def test_missing_environment_returns_base_copy():
    _require_imports()
    base = _base()
    events = EventLog()

    out = resolve(base, {"prod": ServiceConfig(task=TaskConfig(cpu=Value(512)))}, "staging", events=events)

    assert out == base
    assert out is not base
    assert out.task.variables.value is not base.task.variables.value
    assert [e["event"] for e in events.events] == ["overlay.missing"]
    assert events.events[0]["env"] == "staging"


def test_zero_values_override_at_depth():
    _require_imports()
    overlay = ServiceConfig(
        image=ImageConfig(build=BuildConfig(dockerfile=Value(""))),
        routing=RoutingRule(stickiness=Value(False)),
        task=TaskConfig(count=Value(0)),
    )

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.image.build.dockerfile == Value("")
    assert out.image.build.args == _base().image.build.args
    assert out.routing.stickiness == Value(False)
    assert out.task.count == Value(0)


def test_empty_sequence_and_zeros_inside_optional_struct_override():
    """
    Zero-values dentro de um `Opt[struct]` presente nos dois lados
    sobrescrevem a base, inclusive a sequência vazia.
    """
    _require_imports()
    base = ServiceConfig(
        image=ImageConfig(
            health_check=Value(
                ContainerHealthCheck(command=Value(["CMD", "x"]), retries=Value(3), interval=Value("10s"))
            )
        ),
        logging=Value(LoggingConfig(image=Value("fluent-bit:1"), enable_metadata=Value(True))),
    )
    overlay = ServiceConfig(
        image=ImageConfig(
            health_check=Value(ContainerHealthCheck(command=Value([]), retries=Value(0), interval=Value("")))
        ),
        logging=Value(LoggingConfig(enable_metadata=Value(False))),
    )

    out = resolve(base, {"prod": overlay}, "prod")

    hc = out.image.health_check.value
    assert hc.command == Value([])
    assert hc.retries == Value(0)
    assert hc.interval == Value("")
    assert out.logging.value.enable_metadata == Value(False)
    assert out.logging.value.image == Value("fluent-bit:1")


def test_absent_nested_fields_pass_through():
    _require_imports()
    overlay = ServiceConfig(image=ImageConfig(build=BuildConfig(context=Value("frontend"))))

    out = resolve(_base(), {"prod": overlay}, "prod")

    assert out.image.build.context == Value("frontend")
    assert out.image.build.dockerfile == Value("frontend/Dockerfile")
    assert out.image.port == Value(8080)
    assert out.image.build.builder is UNSET


def test_same_inputs_resolve_to_equal_results():
    """
    Resolver duas vezes a mesma (base, overlay, ambiente), a partir de
    cópias independentes, produz resultados iguais.
    """
    _require_imports()
    base = _base()
    overlay = ServiceConfig(
        task=TaskConfig(cpu=Value(512), variables=Value({"FEATURE_X": "on"})),
        routing=RoutingRule(path=Value("")),
        sidecars=Value({"redis": SidecarConfig(image=Value("redis:7"))}),
    )

    first = resolve(copy.deepcopy(base), {"prod": copy.deepcopy(overlay)}, "prod")
    second = resolve(copy.deepcopy(base), {"prod": copy.deepcopy(overlay)}, "prod")

    assert first == second
    assert first is not second


def test_reapplying_overlay_is_stable():
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(cpu=Value(512)), routing=RoutingRule(path=Value("")))
    once = resolve(_base(), {"prod": overlay}, "prod")
    twice = resolve(once, {"prod": overlay}, "prod")
    assert once == twice


def test_inputs_are_not_mutated():
    _require_imports()
    base = _base()
    overlay = ServiceConfig(
        task=TaskConfig(variables=Value({"FEATURE_X": "on"})),
        sidecars=Value({"redis": SidecarConfig(image=Value("redis:7"))}),
    )
    base_snapshot = copy.deepcopy(base)
    overlay_snapshot = copy.deepcopy(overlay)

    out = resolve(base, {"prod": overlay}, "prod")
    out.task.variables.value["LEAK"] = "x"
    out.sidecars.value.pop("nginx")

    assert base == base_snapshot
    assert overlay == overlay_snapshot


# ---------------------------------------------------------------------------
# Structs opcionais e sequências
# ---------------------------------------------------------------------------

def test_optional_struct_merges_recursively_when_both_present():
    _require_imports()
    base = ServiceConfig(
        logging=Value(LoggingConfig(image=Value("fluent-bit:1"), destination=Value({"Name": "cloudwatch"})))
    )
    overlay = ServiceConfig(logging=Value(LoggingConfig(destination=Value({"region": "us-west-2"}))))

    out = resolve(base, {"prod": overlay}, "prod")

    assert out.logging == Value(
        LoggingConfig(
            image=Value("fluent-bit:1"),
            destination=Value({"Name": "cloudwatch", "region": "us-west-2"}),
        )
    )


def test_optional_struct_only_in_overlay_is_taken():
    _require_imports()
    logging_cfg = LoggingConfig(enable_metadata=Value(True))
    out = resolve(_base(), {"prod": ServiceConfig(logging=Value(logging_cfg))}, "prod")
    assert out.logging == Value(logging_cfg)


def test_sequence_is_replaced_wholesale():
    _require_imports()
    base = ServiceConfig(
        image=ImageConfig(
            health_check=Value(
                ContainerHealthCheck(command=Value(["CMD-SHELL", "curl -f http://localhost/"]), retries=Value(3))
            )
        )
    )
    overlay = ServiceConfig(
        image=ImageConfig(health_check=Value(ContainerHealthCheck(command=Value(["CMD", "true"]))))
    )

    out = resolve(base, {"prod": overlay}, "prod")

    hc = out.image.health_check.value
    assert hc.command == Value(["CMD", "true"])
    assert hc.retries == Value(3)


def test_unset_sequence_keeps_base():
    _require_imports()
    base = ServiceConfig(
        image=ImageConfig(health_check=Value(ContainerHealthCheck(command=Value(["CMD", "true"]))))
    )
    overlay = ServiceConfig(image=ImageConfig(health_check=Value(ContainerHealthCheck(retries=Value(5)))))

    out = resolve(base, {"prod": overlay}, "prod")

    assert out.image.health_check.value.command == Value(["CMD", "true"])


# ---------------------------------------------------------------------------
# Conflitos estruturais
# ---------------------------------------------------------------------------

def test_conflict_reports_field_path_and_env():
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(cpu=Value({"units": 512})))

    with pytest.raises(MergeConflictError) as exc:
        resolve(_base(), {"prod": overlay}, "prod")

    details = exc.value.details
    assert details["field_path"] == "task.cpu"
    assert details["env"] == "prod"
    assert details["base_type"] == "int"
    assert details["overlay_type"] == "dict"


def test_conflict_on_raw_value_without_opt():
    _require_imports()
    overlay = ServiceConfig(task=TaskConfig(cpu=512))  # type: ignore[arg-type]

    with pytest.raises(MergeConflictError) as exc:
        resolve(_base(), {"prod": overlay}, "prod")

    assert exc.value.details["field_path"] == "task.cpu"


def test_conflict_on_struct_of_wrong_type():
    _require_imports()
    overlay = ServiceConfig(routing=TaskConfig())  # type: ignore[arg-type]

    with pytest.raises(MergeConflictError) as exc:
        resolve(_base(), {"qa": overlay}, "qa")

    assert exc.value.details["field_path"] == "routing"
    assert exc.value.details["env"] == "qa"


def test_conflict_on_map_item_of_wrong_type():
    _require_imports()
    overlay = ServiceConfig(sidecars=Value({"redis": "redis:7"}))

    with pytest.raises(MergeConflictError) as exc:
        resolve(_base(), {"prod": overlay}, "prod")

    assert exc.value.details["field_path"] == "sidecars"


# ---------------------------------------------------------------------------
# Eventos, manifest e concorrência
# ---------------------------------------------------------------------------

def test_applied_event_lists_overridden_paths():
    _require_imports()
    events = EventLog(source="frontend")
    overlay = ServiceConfig(
        task=TaskConfig(cpu=Value(512)),
        routing=RoutingRule(path=Value("")),
    )

    resolve(_base(), {"prod": overlay}, "prod", events=events)

    (applied,) = events.named("overlay.applied")
    assert applied["env"] == "prod"
    assert applied["source"] == "frontend"
    assert sorted(applied["overridden"]) == ["routing.path", "task.cpu"]


def test_apply_env_preserves_identity_and_drops_overlays(lb_manifest):
    _require_imports()
    from atlas_deploy.core.manifest.workloads import add_overlay

    manifest = add_overlay(lb_manifest, "prod", ServiceConfig(task=TaskConfig(count=Value(3))))

    out = apply_env(manifest, "prod")

    assert out.workload == manifest.workload
    assert out.environments == {}
    assert out.config.task.count == Value(3)
    assert manifest.config.task.count == Value(1)


def test_concurrent_resolution_on_shared_base():
    _require_imports()
    base = _base()
    overlays = {
        f"env{i}": ServiceConfig(task=TaskConfig(cpu=Value(256 * (i + 1))))
        for i in range(8)
    }
    results = {}
    errors = []

    def worker(env):
        try:
            for _ in range(20):
                results[env] = resolve(base, overlays, env)
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(env,)) for env in overlays]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    for i in range(8):
        assert results[f"env{i}"].task.cpu == Value(256 * (i + 1))
    assert base == _base()
