# tests/droidenv/config/test_config_store.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from droidenv.config.providers import DictProvider, EnvironmentProvider, OverrideProvider
from droidenv.config.store import ConfigStore, deepMerge
from droidenv.core.errors import ConfigValidationError


def requireIntWindow(document: Mapping[str, Any]) -> None:
    window = document.get("window")
    if not isinstance(window, int):
        raise ValueError("window must be an int")


def makeStore(validator=None) -> ConfigStore:
    return ConfigStore(
        namespace="config:test",
        validator=validator,
        providers=[
            DictProvider({"window": 60, "nested": {"a": 1, "b": 2}}),
            EnvironmentProvider(environ={"TEST_WINDOW": "30"}, bindings={"window": "TEST_WINDOW"}),
            OverrideProvider(),
        ],
    )


# -------- deepMerge --------

def test_deepMerge_nested():
    out = deepMerge({"a": 1, "b": {"x": 1, "y": 2}}, {"b": {"y": 5, "z": 9}, "c": 7})
    assert out == {"a": 1, "b": {"x": 1, "y": 5, "z": 9}, "c": 7}


def test_deepMerge_nonMappingWins():
    assert deepMerge({"a": {"x": 1}}, {"a": [1]}) == {"a": [1]}
    assert deepMerge({"a": 1}, None) is None


def test_deepMerge_doesNotMutateInputs():
    left = {"a": {"x": 1}}
    deepMerge(left, {"a": {"y": 2}})
    assert left == {"a": {"x": 1}}


# -------- reads --------

def test_get_firstHitFromTop():
    store = makeStore()
    assert store.get("window") == "30"
    assert store.get("nested.a") == 1
    assert store.get("missing") is None


def test_snapshot_mergesAllLayers():
    store = makeStore()
    store.set("nested.b", 5)
    snap = store.snapshot()
    assert snap["namespace"] == "config:test"
    assert snap["values"] == {"window": "30", "nested": {"a": 1, "b": 5}}
    assert snap["layers"] == ["DictProvider", "EnvironmentProvider", "OverrideProvider"]


# -------- writes --------

def test_set_writesOverrideAndNotifies():
    store = makeStore()
    seen: list[tuple] = []
    unsubscribe = store.subscribe(lambda key, old, new, ctx: seen.append((key, old, new, ctx["actor"])))

    store.set("window", 10, actor="test")
    assert store.get("window") == 10
    assert seen == [("window", "30", 10, "test")]

    # Same value again: no notification
    store.set("window", 10)
    assert len(seen) == 1

    unsubscribe()
    store.set("window", 11)
    assert len(seen) == 1


def test_set_invalid_rollsBack():
    store = ConfigStore(
        namespace="config:test",
        validator=requireIntWindow,
        providers=[DictProvider({"window": 60}), OverrideProvider()],
    )
    store.set("window", 5)

    with pytest.raises(ConfigValidationError):
        store.set("window", "soon")
    assert store.get("window") == 5


def test_set_failingListener_isLoggedNotRaised(caplog: pytest.LogCaptureFixture):
    store = makeStore()

    def broken(key, old, new, ctx):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.set("window", 1)
    assert store.get("window") == 1
    assert "change listener failed" in caplog.text


def test_set_withoutOverrideLayer_raises():
    store = ConfigStore(namespace="config:ro", validator=None, providers=[DictProvider({})])
    with pytest.raises(KeyError):
        store.set("window", 1)


def test_validate_wrapsValidatorErrors():
    store = ConfigStore(
        namespace="config:test",
        validator=requireIntWindow,
        providers=[DictProvider({"window": "soon"})],
    )
    with pytest.raises(ConfigValidationError, match="config:test"):
        store.validate()
