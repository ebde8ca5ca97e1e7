# droidenv/environment/user_context.py
from __future__ import annotations
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from droidenv.app.config import getGlobalConfig
from droidenv.app.context import PROCESS_REGISTRY
from droidenv.config.providers import EnvironmentProvider
from droidenv.config.store import ConfigStore
from droidenv.core.errors import ConfigValidationError
from droidenv.core.logging import logContext
from .user_storage import UserEnvironment
from .volumes import HostCapabilities

logger = logging.getLogger(__name__)

__all__ = [
    "PER_USER_RANGE",
    "STRICT_MODE_SETTING",
    "CurrentUserProvider",
    "processUserHandle",
    "GlobalUserContext",
    "bootstrapUserContext",
    "setGlobalUserContext",
]

# uids are allocated to OS users in blocks of this size
PER_USER_RANGE = 100000

CurrentUserProvider = Callable[[], int]

STRICT_MODE_SETTING = "user.strictMode"

# Listener handle on the settings store feeding the registered context
_unsubscribeStrictMode: Callable[[], None] | None = None



def processUserHandle() -> int:
    """OS user owning this process, derived from its uid. 0 where uids do not exist."""
    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return 0
    return getuid() // PER_USER_RANGE



class GlobalUserContext:
    """
    Holds the UserEnvironment of the "current" user.

    Not locked: initForCurrentUser() swaps a single reference, so a concurrent
    reader sees either the previous resolver or the new one, never a partial one.
    Callers switching users while lookups are in flight must serialize the
    switch themselves.
    """
    def __init__(
        self,
        userProvider: CurrentUserProvider = processUserHandle,
        *,
        host: HostCapabilities | None = None,
        env: EnvironmentProvider | None = None,
        strictUserMode: bool = False,
    ) -> None:
        self._userProvider = userProvider
        self._host = host
        self._env = env
        self._strictUserMode = bool(strictUserMode)
        self._current: UserEnvironment = self._buildCurrent()

    def _buildCurrent(self) -> UserEnvironment:
        return UserEnvironment(self._userProvider(), host=self._host, env=self._env)

    # ----- Lifecycle -----

    def initForCurrentUser(self) -> UserEnvironment:
        """Re-reads the current user (e.g. after a profile switch) and replaces the held resolver."""
        fresh = self._buildCurrent()
        previous = self._current
        self._current = fresh
        if previous.userHandle != fresh.userHandle:
            logger.info("Current user changed: %d -> %d", previous.userHandle, fresh.userHandle)
        return fresh

    @property
    def current(self) -> UserEnvironment:
        return self._current

    @property
    def strictUserMode(self) -> bool:
        return self._strictUserMode

    def setUserRequired(self, userRequired: bool) -> None:
        self._strictUserMode = bool(userRequired)

    def forUser(self, userHandle: int) -> UserEnvironment:
        """Resolver for an explicit user, sharing this context's host and environment."""
        return UserEnvironment(userHandle, host=self._host, env=self._env)

    def _checkUserRequired(self, accessor: str) -> UserEnvironment:
        current = self._current
        if self._strictUserMode:
            with logContext(userHandle=current.userHandle):
                logger.error(
                    "Path requests must specify a user by using UserEnvironment (%s() used current user %d)",
                    accessor, current.userHandle,
                    stack_info=True,
                    stacklevel=3,
                )
        return current

    # ----- User-agnostic accessors (current user) -----

    def getExternalDirs(self) -> list[Path]:
        return self._checkUserRequired("getExternalDirs").getExternalDirs()

    def buildExternalStorageAndroidDataDirs(self) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAndroidDataDirs").buildExternalStorageAndroidDataDirs()

    def buildExternalStorageAndroidObbDirs(self) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAndroidObbDirs").buildExternalStorageAndroidObbDirs()

    def buildExternalStorageAppDataDirs(self, packageName: str) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAppDataDirs").buildExternalStorageAppDataDirs(packageName)

    def buildExternalStorageAppMediaDirs(self, packageName: str) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAppMediaDirs").buildExternalStorageAppMediaDirs(packageName)

    def buildExternalStorageAppObbDirs(self, packageName: str) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAppObbDirs").buildExternalStorageAppObbDirs(packageName)

    def buildExternalStorageAppFilesDirs(self, packageName: str) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAppFilesDirs").buildExternalStorageAppFilesDirs(packageName)

    def buildExternalStorageAppCacheDirs(self, packageName: str) -> list[Path]:
        return self._checkUserRequired("buildExternalStorageAppCacheDirs").buildExternalStorageAppCacheDirs(packageName)

    def buildExternalStoragePublicDirs(self, dirType: str | None = None) -> list[Path]:
        """Without `dirType`, the current user's volume roots themselves."""
        current = self._checkUserRequired("buildExternalStoragePublicDirs")
        if dirType is None:
            return current.getExternalDirs()
        return current.buildExternalStoragePublicDirs(dirType)



def _settingsStore() -> ConfigStore | None:
    """Global settings, or None when they cannot be loaded. Path lookups never fail on settings."""
    try:
        return getGlobalConfig()
    except (ConfigValidationError, FileNotFoundError, TypeError):
        logger.warning("Settings unavailable; %s defaults to off", STRICT_MODE_SETTING, exc_info=True)
        return None



def _followStrictModeSetting(store: ConfigStore) -> None:
    """Keeps the registered context's strict mode in step with later writes to the setting."""
    global _unsubscribeStrictMode
    if _unsubscribeStrictMode is not None:
        _unsubscribeStrictMode()

    def onSettingChanged(key: str, oldValue: Any, newValue: Any, context: dict[str, Any]) -> None:
        # Writes to a parent ("user") replace the setting as well
        if key != STRICT_MODE_SETTING and not STRICT_MODE_SETTING.startswith(key + "."):
            return
        ctx = PROCESS_REGISTRY.get("user.context")
        if ctx is not None:
            ctx.setUserRequired(bool(store.get(STRICT_MODE_SETTING)))

    _unsubscribeStrictMode = store.subscribe(onSettingChanged)



def bootstrapUserContext(
    userProvider: CurrentUserProvider | None = None,
    *,
    host: HostCapabilities | None = None,
    env: EnvironmentProvider | None = None,
    strictUserMode: bool | None = None,
) -> GlobalUserContext:
    """
    Builds the process-wide context and registers it, replacing any previous one.

    strictUserMode defaults to the `user.strictMode` setting, and later writes to
    that setting through the global ConfigStore are applied to the new context.
    Settings that fail to load are logged and treated as strict mode off.
    """
    store = _settingsStore()
    if strictUserMode is None:
        strictUserMode = bool(store.get(STRICT_MODE_SETTING)) if store is not None else False

    ctx = GlobalUserContext(
        userProvider or processUserHandle,
        host=host,
        env=env,
        strictUserMode=strictUserMode,
    )
    setGlobalUserContext(ctx)
    if store is not None:
        _followStrictModeSetting(store)
    logger.debug("User context ready: %r (strict=%s)", ctx.current, ctx.strictUserMode)
    return ctx



def setGlobalUserContext(ctx: GlobalUserContext | None) -> None:
    """Swaps the process-wide context in one step; None unregisters it."""
    if ctx is None:
        PROCESS_REGISTRY.unregister("user.context")
        return
    PROCESS_REGISTRY.register("user.context", ctx, overwrite=True)
