# tests/core/manifest/test_optional.py
"""
Testes do campo opcional tri-state.

Os testes asseguram que:
- `UNSET` é um singleton preservado por cópia e pickle
- valores zero (`""`, `0`, `False`, `{}`) são presentes, não ausentes
- `None` nunca é confundido com um valor presente via `maybe`
- toda declaração de campo carrega sua política de merge
"""

import copy
import pickle
from dataclasses import fields

import pytest

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
from atlas_deploy.core.manifest.optional import (
    MERGE_METADATA_KEY,
    UNSET,
    MergePolicy,
    Unset,
    Value,
    is_set,
    lookup,
    maybe,
    value_or,
)


def test_unset_is_singleton():
    assert Unset() is UNSET
    assert copy.copy(UNSET) is UNSET
    assert copy.deepcopy(UNSET) is UNSET
    assert pickle.loads(pickle.dumps(UNSET)) is UNSET
    assert repr(UNSET) == "UNSET"
    assert not UNSET


@pytest.mark.parametrize("zero", ["", 0, False, {}, []])
def test_zero_values_are_present(zero):
    opt = Value(zero)
    assert is_set(opt)
    assert lookup(opt) == (zero, True)
    assert value_or(opt, "default") == zero


def test_unset_lookup_and_default():
    assert not is_set(UNSET)
    assert lookup(UNSET) == (None, False)
    assert value_or(UNSET, "/") == "/"


def test_maybe_maps_none_to_unset():
    assert maybe(None) is UNSET
    assert maybe("") == Value("")
    assert maybe(0) == Value(0)


def test_value_is_immutable():
    v = Value("x")
    with pytest.raises(Exception):
        v.value = "y"  # type: ignore[misc]


@pytest.mark.parametrize(
    "cls",
    [
        BuildConfig,
        ContainerHealthCheck,
        ImageConfig,
        RoutingRule,
        TaskConfig,
        LoggingConfig,
        SidecarConfig,
        ServiceConfig,
    ],
)
def test_every_field_declares_a_merge_policy(cls):
    for f in fields(cls):
        assert isinstance(f.metadata.get(MERGE_METADATA_KEY), MergePolicy), f"{cls.__name__}.{f.name}"


def test_new_overlay_starts_fully_unset():
    overlay = ServiceConfig()
    assert overlay.image.port is UNSET
    assert overlay.image.build.dockerfile is UNSET
    assert overlay.routing.path is UNSET
    assert overlay.task.cpu is UNSET
    assert overlay.logging is UNSET
    assert overlay.sidecars is UNSET
