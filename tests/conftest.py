# tests/conftest.py
from __future__ import annotations
import sys
import pytest

from droidenv.app.config import resetConfig
from droidenv.environment.partitions import PARTITION_DEFAULTS
from droidenv.environment.user_context import setGlobalUserContext

_STORAGE_VARS = ("EXTERNAL_STORAGE", "EMULATED_STORAGE_TARGET")
_SETTINGS_VARS = ("DROIDENV_SETTINGS", "DROIDENV_DEV_MODE", "DROIDENV_LOG_FILE", "DROIDENV_STRICT_USER")



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def isolatedEnvironment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """
    Every test starts without storage/partition/settings variables, with an
    empty HOME (no ~/.droidenv settings file), no settings store and no user context.
    """
    for name in _STORAGE_VARS + _SETTINGS_VARS:
        monkeypatch.delenv(name, raising=False)
    for variable, _default in PARTITION_DEFAULTS.values():
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    resetConfig()
    setGlobalUserContext(None)
    yield
    resetConfig()
    setGlobalUserContext(None)
