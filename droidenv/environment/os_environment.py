# droidenv/environment/os_environment.py
"""
Module-level accessors for the OS storage layout.

Partition roots are resolved once, when this module is imported. External-storage
accessors without a user argument go through the process-wide GlobalUserContext.

The current user is not resolved at import time: the context is bootstrapped
(the implicit first initForCurrentUser()) by the first call that needs it, or
earlier by an explicit bootstrapUserContext(). Importing this module therefore
never loads settings or reads the process uid.

Prefer UserEnvironment.forUser() wherever the user is known; with
setUserRequired(True) every user-agnostic call is logged.
"""
from __future__ import annotations
from pathlib import Path

from droidenv.app.globals import getUserContext, hasUserContext
from .partitions import PartitionRootRegistry
from .pathbuilder import buildPath, buildPaths
from .user_context import GlobalUserContext, bootstrapUserContext
from .user_storage import (
    DIR_ANDROID, DIR_CACHE, DIR_DATA, DIR_FILES, DIR_MEDIA, DIR_OBB,
    UserEnvironment,
)

__all__ = [
    "DIR_ANDROID", "DIR_DATA", "DIR_MEDIA", "DIR_OBB", "DIR_FILES", "DIR_CACHE",
    "PARTITION_ROOTS",
    "getRootDirectory", "getDataDirectory", "getDataSystemDirectory",
    "getDataAppDirectory", "getDataDataDirectory", "getExpandDirectory",
    "getStorageDirectory", "getDownloadCacheDirectory", "getOemDirectory",
    "getOdmDirectory", "getVendorDirectory", "getProductDirectory",
    "getSystemExtDirectory", "getApexDirectory",
    "initForCurrentUser", "setUserRequired", "currentUserEnvironment",
    "buildExternalStorageAndroidDataDirs", "buildExternalStorageAndroidObbDirs",
    "buildExternalStorageAppDataDirs", "buildExternalStorageAppMediaDirs",
    "buildExternalStorageAppObbDirs", "buildExternalStorageAppFilesDirs",
    "buildExternalStorageAppCacheDirs", "buildExternalStoragePublicDirs",
    "buildPath", "buildPaths", "UserEnvironment",
]

# ------------------------------------------------------------------ #
# Partition roots (resolved at import)
# ------------------------------------------------------------------ #

PARTITION_ROOTS = PartitionRootRegistry()



def getRootDirectory() -> Path:
    return PARTITION_ROOTS.getRootDirectory()

def getDataDirectory() -> Path:
    return PARTITION_ROOTS.getDataDirectory()

def getDataSystemDirectory() -> Path:
    return PARTITION_ROOTS.getDataSystemDirectory()

def getDataAppDirectory() -> Path:
    return PARTITION_ROOTS.getDataAppDirectory()

def getDataDataDirectory() -> Path:
    return PARTITION_ROOTS.getDataDataDirectory()

def getExpandDirectory() -> Path:
    return PARTITION_ROOTS.getExpandDirectory()

def getStorageDirectory() -> Path:
    return PARTITION_ROOTS.getStorageDirectory()

def getDownloadCacheDirectory() -> Path:
    return PARTITION_ROOTS.getDownloadCacheDirectory()

def getOemDirectory() -> Path:
    return PARTITION_ROOTS.getOemDirectory()

def getOdmDirectory() -> Path:
    return PARTITION_ROOTS.getOdmDirectory()

def getVendorDirectory() -> Path:
    return PARTITION_ROOTS.getVendorDirectory()

def getProductDirectory() -> Path:
    return PARTITION_ROOTS.getProductDirectory()

def getSystemExtDirectory() -> Path:
    return PARTITION_ROOTS.getSystemExtDirectory()

def getApexDirectory() -> Path:
    return PARTITION_ROOTS.getApexDirectory()

# ------------------------------------------------------------------ #
# Current-user context
# ------------------------------------------------------------------ #

def _context() -> GlobalUserContext:
    if not hasUserContext():
        return bootstrapUserContext()
    return getUserContext()



def initForCurrentUser() -> UserEnvironment:
    """Rebuilds the current user's resolver, e.g. after a user switch."""
    return _context().initForCurrentUser()



def setUserRequired(userRequired: bool) -> None:
    _context().setUserRequired(userRequired)



def currentUserEnvironment() -> UserEnvironment:
    return _context().current

# ------------------------------------------------------------------ #
# User-agnostic external-storage accessors
# ------------------------------------------------------------------ #

def buildExternalStorageAndroidDataDirs() -> list[Path]:
    """Android-specific data directories on every volume of the current user."""
    return _context().buildExternalStorageAndroidDataDirs()

def buildExternalStorageAndroidObbDirs() -> list[Path]:
    return _context().buildExternalStorageAndroidObbDirs()

def buildExternalStorageAppDataDirs(packageName: str) -> list[Path]:
    """Raw paths to an application's data."""
    return _context().buildExternalStorageAppDataDirs(packageName)

def buildExternalStorageAppMediaDirs(packageName: str) -> list[Path]:
    """Raw paths to an application's media."""
    return _context().buildExternalStorageAppMediaDirs(packageName)

def buildExternalStorageAppObbDirs(packageName: str) -> list[Path]:
    """Raw paths to an application's OBB files."""
    return _context().buildExternalStorageAppObbDirs(packageName)

def buildExternalStorageAppFilesDirs(packageName: str) -> list[Path]:
    """Paths to an application's files."""
    return _context().buildExternalStorageAppFilesDirs(packageName)

def buildExternalStorageAppCacheDirs(packageName: str) -> list[Path]:
    """Paths to an application's cache."""
    return _context().buildExternalStorageAppCacheDirs(packageName)

def buildExternalStoragePublicDirs(dirType: str | None = None) -> list[Path]:
    return _context().buildExternalStoragePublicDirs(dirType)
