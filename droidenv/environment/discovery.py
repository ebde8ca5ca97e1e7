# droidenv/environment/discovery.py
from __future__ import annotations
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from droidenv.config.providers import EnvironmentProvider
from droidenv.core.errors import CapabilityUnavailableError
from .pathbuilder import buildPath
from .volumes import FLAG_FOR_WRITE, HostCapabilities, VolumeEnumerator

logger = logging.getLogger(__name__)

__all__ = [
    "ENV_EXTERNAL_STORAGE",
    "ENV_EMULATED_STORAGE_TARGET",
    "DEFAULT_EXTERNAL_STORAGE",
    "DiscoveryStrategy",
    "EnvironmentStrategy",
    "VolumeManagerStrategy",
    "selectDiscoveryStrategy",
]

ENV_EXTERNAL_STORAGE = "EXTERNAL_STORAGE"
ENV_EMULATED_STORAGE_TARGET = "EMULATED_STORAGE_TARGET"
DEFAULT_EXTERNAL_STORAGE = "/storage/sdcard0"



class DiscoveryStrategy(ABC):
    """Finds the external-storage volume roots of one user. Always returns at least one path."""
    name: str = "abstract"

    @abstractmethod
    def discover(self, userHandle: int) -> list[Path]: ...



class EnvironmentStrategy(DiscoveryStrategy):
    """
    Legacy discovery from environment variables:
      • EMULATED_STORAGE_TARGET set → <target>/<userHandle> (one volume shared by all users, split by user id)
      • else EXTERNAL_STORAGE, or /storage/sdcard0 when unset (one physical volume, not split)
    """
    name = "environment"

    def __init__(self, env: EnvironmentProvider | None = None) -> None:
        self._env = env or EnvironmentProvider()

    def discover(self, userHandle: int) -> list[Path]:
        rawEmulatedTarget = self._env.lookup(ENV_EMULATED_STORAGE_TARGET)
        if rawEmulatedTarget is not None:
            # /storage/emulated/0
            return [buildPath(rawEmulatedTarget, str(userHandle))]

        rawExternalStorage = self._env.lookup(ENV_EXTERNAL_STORAGE)
        if rawExternalStorage is None:
            logger.warning("%s undefined; falling back to default", ENV_EXTERNAL_STORAGE)
            rawExternalStorage = DEFAULT_EXTERNAL_STORAGE
        # /storage/sdcard0
        return [buildPath(rawExternalStorage)]



class VolumeManagerStrategy(DiscoveryStrategy):
    """
    Asks the host for every writable volume of the user. Any failure, or a
    result without usable paths, is logged and answered by `fallback` instead.
    The query is made once per call and never retried.
    """
    name = "volumeManager"

    def __init__(self, enumerator: VolumeEnumerator, fallback: DiscoveryStrategy) -> None:
        self._enumerator = enumerator
        self.fallback = fallback

    def queryVolumes(self, userHandle: int) -> list[Path]:
        """
        Raises CapabilityUnavailableError (reason notFound / accessDenied /
        invocationFailed / noPaths) instead of returning an unusable result.
        """
        try:
            getVolumeList = getattr(self._enumerator, "getVolumeList")
        except AttributeError as err:
            raise CapabilityUnavailableError("notFound", "host has no getVolumeList()") from err

        try:
            volumes = getVolumeList(userHandle, FLAG_FOR_WRITE)
            if volumes is None:
                raise CapabilityUnavailableError("invocationFailed", "getVolumeList() returned None")
            logger.debug("Volumes reported for user %d: %r", userHandle, volumes)

            paths: list[Path] = []
            for volume in volumes:
                pathFile = volume.getPathFile()
                # Unmounted volumes report no path; "" would resolve to the cwd
                if pathFile is None or os.fspath(pathFile) == "":
                    continue
                paths.append(Path(pathFile).absolute())
        except CapabilityUnavailableError:
            raise
        except (AttributeError, NotImplementedError) as err:
            raise CapabilityUnavailableError("notFound", f"volume query not implemented: {err}") from err
        except PermissionError as err:
            raise CapabilityUnavailableError("accessDenied", f"volume query denied: {err}") from err
        except Exception as err:
            raise CapabilityUnavailableError("invocationFailed", f"volume query failed: {err}") from err

        if not paths:
            raise CapabilityUnavailableError("noPaths", "no reported volume has a path")
        return paths

    def discover(self, userHandle: int) -> list[Path]:
        try:
            return self.queryVolumes(userHandle)
        except CapabilityUnavailableError as err:
            if err.reason == "noPaths":
                logger.info("Volume query for user %d gave no paths; using %s", userHandle, self.fallback.name)
            else:
                logger.warning(
                    "Volume query for user %d unavailable (%s): %s; using %s",
                    userHandle, err.reason, err, self.fallback.name,
                    exc_info=err.__cause__ is not None,
                )
            return self.fallback.discover(userHandle)



def selectDiscoveryStrategy(host: HostCapabilities | None, env: EnvironmentProvider | None = None) -> DiscoveryStrategy:
    """
    Picks the strategy once, from what the host reports, instead of probing at every lookup.
    """
    fallback = EnvironmentStrategy(env)
    if host is None or host.volumeEnumerator is None or not host.supportsVolumeQuery:
        return fallback
    return VolumeManagerStrategy(host.volumeEnumerator, fallback)
