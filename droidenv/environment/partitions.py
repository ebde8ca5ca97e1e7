# droidenv/environment/partitions.py
from __future__ import annotations
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from droidenv.config.providers import EnvironmentProvider
from .pathbuilder import buildPath

__all__ = [
    "PartitionName",
    "PartitionRoot",
    "PartitionRootRegistry",
    "PARTITION_DEFAULTS",
    "resolveDirectory",
]

# ------------------------------------------------------------------ #
# Partition table
# ------------------------------------------------------------------ #

PartitionName = Literal[
    "root", "data", "expand", "storage", "downloadCache",
    "oem", "odm", "vendor", "product", "systemExt", "apex",
]

# name -> (override variable, default path)
PARTITION_DEFAULTS: dict[str, tuple[str, str]] = {
    "root":          ("ANDROID_ROOT",    "/system"),
    "data":          ("ANDROID_DATA",    "/data"),
    "expand":        ("ANDROID_EXPAND",  "/mnt/expand"),
    "storage":       ("ANDROID_STORAGE", "/storage"),
    "downloadCache": ("DOWNLOAD_CACHE",  "/cache"),
    "oem":           ("OEM_ROOT",        "/oem"),
    "odm":           ("ODM_ROOT",        "/odm"),
    "vendor":        ("VENDOR_ROOT",     "/vendor"),
    "product":       ("PRODUCT_ROOT",    "/product"),
    "systemExt":     ("SYSTEM_EXT_ROOT", "/system_ext"),
    "apex":          ("APEX_ROOT",       "/apex"),
}

# ------------------------------------------------------------------ #
# Resolution
# ------------------------------------------------------------------ #

def resolveDirectory(variableName: str, defaultPath: str, env: EnvironmentProvider | None = None) -> Path:
    """
    Returns the value of `variableName` verbatim when set and non-empty, otherwise `defaultPath`.
    """
    env = env or EnvironmentProvider()
    path = env.lookup(variableName)
    return Path(defaultPath) if path is None else Path(path)



@dataclass(frozen=True)
class PartitionRoot:
    name: str
    overrideVariable: str
    defaultPath: str
    resolvedPath: Path



class PartitionRootRegistry:
    """
    Fixed OS partition roots, resolved once at construction.

    Later environment changes are not observed; build a new registry to re-read them.
    """
    def __init__(self, env: EnvironmentProvider | None = None) -> None:
        env = env or EnvironmentProvider()
        self._roots: dict[str, PartitionRoot] = {
            name: PartitionRoot(
                name=name,
                overrideVariable=variable,
                defaultPath=default,
                resolvedPath=resolveDirectory(variable, default, env),
            )
            for name, (variable, default) in PARTITION_DEFAULTS.items()
        }

    def get(self, name: PartitionName | str) -> PartitionRoot:
        try:
            return self._roots[name]
        except KeyError:
            raise KeyError(f"Unknown partition '{name}'. Known: {', '.join(self._roots)}") from None

    def path(self, name: PartitionName | str) -> Path:
        return self.get(name).resolvedPath

    def asDict(self) -> dict[str, Path]:
        return {name: root.resolvedPath for name, root in self._roots.items()}

    def __iter__(self) -> Iterator[PartitionRoot]:
        return iter(self._roots.values())

    # ----- Accessors -----

    def getRootDirectory(self) -> Path:
        """Root of the "system" partition holding the core OS. Always present, mounted read-only."""
        return self.path("root")

    def getDataDirectory(self) -> Path:
        """The user data directory."""
        return self.path("data")

    def getDataSystemDirectory(self) -> Path:
        return buildPath(self.path("data"), "system")

    def getDataAppDirectory(self) -> Path:
        return buildPath(self.path("data"), "app")

    def getDataDataDirectory(self) -> Path:
        return buildPath(self.path("data"), "data")

    def getExpandDirectory(self) -> Path:
        """Mount root for adopted (expanded) storage volumes."""
        return self.path("expand")

    def getStorageDirectory(self) -> Path:
        """Parent of every external-storage mount point."""
        return self.path("storage")

    def getDownloadCacheDirectory(self) -> Path:
        return self.path("downloadCache")

    def getOemDirectory(self) -> Path:
        """Root of the "oem" partition holding OEM customizations, if any. Mounted read-only."""
        return self.path("oem")

    def getOdmDirectory(self) -> Path:
        """Root of the "odm" partition holding ODM customizations, if any. Mounted read-only."""
        return self.path("odm")

    def getVendorDirectory(self) -> Path:
        """
        Root of the "vendor" partition: vendor-provided software that should
        persist across simple reflashing of the "system" partition.
        """
        return self.path("vendor")

    def getProductDirectory(self) -> Path:
        """Root of the "product" partition holding product-specific customizations. Mounted read-only."""
        return self.path("product")

    def getSystemExtDirectory(self) -> Path:
        """Root of the "system_ext" partition extending the system partition. Mounted read-only."""
        return self.path("systemExt")

    def getApexDirectory(self) -> Path:
        return self.path("apex")
