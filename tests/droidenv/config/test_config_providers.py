# tests/droidenv/config/test_config_providers.py
from __future__ import annotations

from pathlib import Path

import json5
import pytest

from droidenv.config.providers import (
    OverrideProvider,
    DictProvider,
    DefaultsProvider,
    EnvironmentProvider,
    parseEnvBool,
)


# ----------------------------
# OverrideProvider tests
# ----------------------------

def test_overrideProvider_setAndGet_pathCreatesNested() -> None:
    provider = OverrideProvider()

    provider.set("debug.suppressRecurringMessages.enabled", True)
    provider.set("debug.devModeEnabled", False)

    assert provider.get("debug.suppressRecurringMessages.enabled") is True
    assert provider.get("debug.devModeEnabled") is False
    assert provider.get("user.strictMode") is None

    assert provider.to_dict() == {
        "debug": {
            "suppressRecurringMessages": {"enabled": True},
            "devModeEnabled": False,
        },
    }


def test_overrideProvider_setNone_deletesAndPrunes() -> None:
    provider = OverrideProvider()
    provider.set("user.strictMode", True)
    provider.set("logging.file", "droidenv.log")

    provider.set("user.strictMode", None)

    assert provider.to_dict() == {"logging": {"file": "droidenv.log"}}


def test_overrideProvider_storesCopies() -> None:
    provider = OverrideProvider()
    value = {"enabled": True}
    provider.set("debug.suppressRecurringMessages", value)
    value["enabled"] = False

    assert provider.get("debug.suppressRecurringMessages.enabled") is True
    provider.to_dict()["debug"]["suppressRecurringMessages"]["enabled"] = False
    assert provider.get("debug.suppressRecurringMessages.enabled") is True


# ----------------------------
# DictProvider tests
# ----------------------------

def test_dictProvider_isReadOnly() -> None:
    provider = DictProvider({"user": {"strictMode": False}})
    assert provider.get("user.strictMode") is False

    with pytest.raises(RuntimeError):
        provider.set("user.strictMode", True)


# ----------------------------
# DefaultsProvider tests
# ----------------------------

def test_defaultsProvider_fromData() -> None:
    provider = DefaultsProvider(data={"logging": {"file": "x.log"}})
    assert provider.get("logging.file") == "x.log"
    assert provider.path is None


def test_defaultsProvider_fromJson5File(tmp_path: Path) -> None:
    path = tmp_path / "droidenv.json5"
    path.write_text(
        """
        // comments and trailing commas are fine
        {
            user: { strictMode: true, },
        }
        """,
        encoding="utf-8",
    )

    provider = DefaultsProvider(path=path)
    assert provider.path == path
    assert provider.get("user.strictMode") is True
    assert provider.to_dict() == {"user": {"strictMode": True}}


def test_defaultsProvider_missingFile_strictRaises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        DefaultsProvider(path=tmp_path / "nope.json5")


def test_defaultsProvider_missingFile_nonStrictIsEmpty(tmp_path: Path) -> None:
    provider = DefaultsProvider(path=tmp_path / "nope.json5", strict=False)
    assert provider.to_dict() == {}


def test_defaultsProvider_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        DefaultsProvider(path=tmp_path, strict=False)


def test_defaultsProvider_nonObjectFile_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.json5"
    path.write_text(json5.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(TypeError):
        DefaultsProvider(path=path)


def test_defaultsProvider_brokenFile_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json5"
    path.write_text("{ user: ", encoding="utf-8")
    with pytest.raises(TypeError):
        DefaultsProvider(path=path)


def test_defaultsProvider_dataAndPath_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        DefaultsProvider({}, path=tmp_path / "x.json5")
    with pytest.raises(ValueError):
        DefaultsProvider()


def test_defaultsProvider_expandsHome(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "someone"
    (home / ".droidenv").mkdir(parents=True)
    (home / ".droidenv" / "droidenv.json5").write_text("{logging: {file: 'a.log'}}", encoding="utf-8")
    monkeypatch.setenv("HOME", str(home))

    provider = DefaultsProvider(path="~/.droidenv/droidenv.json5")
    assert provider.get("logging.file") == "a.log"


# ----------------------------
# EnvironmentProvider tests
# ----------------------------

@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), (" yes ", True), ("on", True),
     ("0", False), ("False", False), ("no", False), ("off", False),
     ("maybe", None), ("", None)],
)
def test_parseEnvBool(raw: str, expected: bool | None) -> None:
    assert parseEnvBool(raw) is expected


def test_environmentProvider_lookup_emptyIsAbsent() -> None:
    provider = EnvironmentProvider(environ={"EXTERNAL_STORAGE": "", "EMULATED_STORAGE_TARGET": "/storage/emulated"})
    assert provider.lookup("EXTERNAL_STORAGE") is None
    assert provider.lookup("MISSING") is None
    assert provider.lookup("EMULATED_STORAGE_TARGET") == "/storage/emulated"


def test_environmentProvider_readsProcessEnvironmentLive(monkeypatch: pytest.MonkeyPatch) -> None:
    provider = EnvironmentProvider()
    assert provider.lookup("EXTERNAL_STORAGE") is None
    monkeypatch.setenv("EXTERNAL_STORAGE", "/mnt/sdcard")
    assert provider.lookup("EXTERNAL_STORAGE") == "/mnt/sdcard"


def test_environmentProvider_bindings() -> None:
    provider = EnvironmentProvider(
        environ={"DROIDENV_STRICT_USER": "yes", "DROIDENV_LOG_FILE": "/tmp/d.log"},
        bindings={
            "user.strictMode": "DROIDENV_STRICT_USER",
            "logging.file": "DROIDENV_LOG_FILE",
            "debug.devModeEnabled": "DROIDENV_DEV_MODE",
        },
    )

    assert provider.get("user.strictMode") is True
    assert provider.get("logging.file") == "/tmp/d.log"
    assert provider.get("debug.devModeEnabled") is None
    # Unbound keys never read the environment
    assert provider.get("DROIDENV_LOG_FILE") is None

    assert provider.to_dict() == {
        "user": {"strictMode": True},
        "logging": {"file": "/tmp/d.log"},
    }
    with pytest.raises(RuntimeError):
        provider.set("user.strictMode", False)
