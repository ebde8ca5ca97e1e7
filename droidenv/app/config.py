# droidenv/app/config.py
from __future__ import annotations
import logging
from collections.abc import Mapping
from pathlib import Path

from droidenv.app.context import PROCESS_REGISTRY
from droidenv.app.settings import (
    DEFAULT_SETTINGS_FILE, ENV_SETTINGS_FILE, SETTINGS_DEFAULTS,
    SETTINGS_ENV_BINDINGS, validateSettings,
)
from droidenv.config.providers import DefaultsProvider, DictProvider, EnvironmentProvider, OverrideProvider
from droidenv.config.store import ConfigStore

logger = logging.getLogger(__name__)

__all__ = ["initConfig", "resetConfig", "getGlobalConfig", "buildSettingsStore"]

# ------------------------------------------------------------------ #
# Module singletons
# ------------------------------------------------------------------ #

_CONFIG_STORE: ConfigStore | None = None

# ------------------------------------------------------------------ #
# Core initialization
# ------------------------------------------------------------------ #

def buildSettingsStore(
    *,
    environ: Mapping[str, str] | None = None,
    settingsPath: Path | str | None = None,
) -> ConfigStore:
    """
    Layers, bottom to top:
      1) compiled defaults
      2) settings file (JSON5): `settingsPath`, else $DROIDENV_SETTINGS, else ~/.droidenv/droidenv.json5
      3) DROIDENV_* environment variables
      4) in-memory overrides
    An explicitly named settings file must exist; the home-directory default may be absent.
    """
    env = EnvironmentProvider(environ=environ, bindings=SETTINGS_ENV_BINDINGS)

    strict = True
    if settingsPath is None:
        settingsPath = env.lookup(ENV_SETTINGS_FILE)
    if settingsPath is None:
        settingsPath = DEFAULT_SETTINGS_FILE
        strict = False

    store = ConfigStore(
        namespace="config:global",
        validator=validateSettings,
        providers=[
            DictProvider(SETTINGS_DEFAULTS),
            DefaultsProvider(path=settingsPath, strict=strict),
            env,
            OverrideProvider(),
        ],
    )
    store.validate()
    return store



def initConfig(
    *,
    environ: Mapping[str, str] | None = None,
    settingsPath: Path | str | None = None,
) -> ConfigStore:
    """
    Initialize config subsystem (idempotent).
    """
    global _CONFIG_STORE
    if _CONFIG_STORE is not None:
        # Already initialized
        return _CONFIG_STORE
    _CONFIG_STORE = buildSettingsStore(environ=environ, settingsPath=settingsPath)
    PROCESS_REGISTRY.register("config.global", _CONFIG_STORE, overwrite=True)
    logger.debug("Config initialized (layers: %s)", ", ".join(_CONFIG_STORE.snapshot()["layers"]))
    return _CONFIG_STORE



def resetConfig() -> None:
    """Drops the global store so the next access rebuilds it (tests, settings reload)."""
    global _CONFIG_STORE
    _CONFIG_STORE = None
    PROCESS_REGISTRY.unregister("config.global")



def getGlobalConfig() -> ConfigStore:
    """
    Returns the global ConfigStore, initializing it on first use.
    """
    if _CONFIG_STORE is None:
        return initConfig()
    return _CONFIG_STORE
