# droidenv/environment/user_storage.py
from __future__ import annotations
import logging
import warnings
from pathlib import Path

from droidenv.config.providers import EnvironmentProvider
from droidenv.core.errors import InvalidArgumentError
from droidenv.core.logging import logContext
from .discovery import DiscoveryStrategy, EnvironmentStrategy, selectDiscoveryStrategy
from .pathbuilder import buildPaths
from .volumes import HostCapabilities

logger = logging.getLogger(__name__)

__all__ = [
    "DIR_ANDROID", "DIR_DATA", "DIR_MEDIA", "DIR_OBB", "DIR_FILES", "DIR_CACHE",
    "UserEnvironment", "validateUserHandle",
]

DIR_ANDROID = "Android"
DIR_DATA = "data"
DIR_MEDIA = "media"
DIR_OBB = "obb"
DIR_FILES = "files"
DIR_CACHE = "cache"



def validateUserHandle(userHandle: object) -> int:
    # bool is an int subclass; True is not user 1
    if isinstance(userHandle, bool) or not isinstance(userHandle, int):
        raise InvalidArgumentError(f"User handle must be an int, not '{type(userHandle).__name__}'")
    if userHandle < 0:
        raise InvalidArgumentError(f"User handle must be non-negative, got {userHandle}")
    return userHandle



class UserEnvironment:
    """
    External-storage layout of one OS user.

    The discovery strategy is chosen once, here; the volume list itself is
    recomputed on every call and never cached.

    Every app path has the shape <volume>/Android/<data|media|obb>/<package>[/<files|cache>].
    """
    def __init__(
        self,
        userHandle: int,
        *,
        host: HostCapabilities | None = None,
        env: EnvironmentProvider | None = None,
        strategy: DiscoveryStrategy | None = None,
    ) -> None:
        self._userHandle = validateUserHandle(userHandle)
        self._env = env
        self._strategy = strategy or selectDiscoveryStrategy(host, env)

    @classmethod
    def forUser(
        cls,
        userHandle: int,
        *,
        host: HostCapabilities | None = None,
        env: EnvironmentProvider | None = None,
    ) -> "UserEnvironment":
        return cls(userHandle, host=host, env=env)

    @property
    def userHandle(self) -> int:
        return self._userHandle

    @property
    def strategy(self) -> DiscoveryStrategy:
        return self._strategy

    def __repr__(self) -> str:
        return f"{type(self).__name__}(userHandle={self._userHandle}, strategy={self._strategy.name})"

    # ----- Volumes -----

    def getExternalDirs(self) -> list[Path]:
        """Volume roots of this user, primary first. Never empty."""
        with logContext(userHandle=self._userHandle, strategy=self._strategy.name):
            dirs = list(self._strategy.discover(self._userHandle))
            if not dirs:
                logger.warning("%s found no volumes; using environment", self._strategy.name)
                dirs = EnvironmentStrategy(self._env).discover(self._userHandle)
        return dirs

    # ----- Per-package paths -----

    def buildExternalStoragePublicDirs(self, dirType: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), dirType)

    def buildExternalStorageAndroidDataDirs(self) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_DATA)

    def buildExternalStorageAndroidObbDirs(self) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_OBB)

    def buildExternalStorageAppDataDirs(self, packageName: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_DATA, packageName)

    def buildExternalStorageAppMediaDirs(self, packageName: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_MEDIA, packageName)

    def buildExternalStorageAppObbDirs(self, packageName: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_OBB, packageName)

    def buildExternalStorageAppFilesDirs(self, packageName: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_DATA, packageName, DIR_FILES)

    def buildExternalStorageAppCacheDirs(self, packageName: str) -> list[Path]:
        return buildPaths(self.getExternalDirs(), DIR_ANDROID, DIR_DATA, packageName, DIR_CACHE)

    # ----- Legacy single-volume adapters -----

    def getExternalStorageDirectory(self) -> Path:
        """Deprecated: primary volume only. Use getExternalDirs()."""
        warnings.warn(
            "getExternalStorageDirectory() is deprecated; use getExternalDirs()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.getExternalDirs()[0]

    def getExternalStoragePublicDirectory(self, dirType: str) -> Path:
        """Deprecated: primary volume only. Use buildExternalStoragePublicDirs()."""
        warnings.warn(
            "getExternalStoragePublicDirectory() is deprecated; use buildExternalStoragePublicDirs()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.buildExternalStoragePublicDirs(dirType)[0]
