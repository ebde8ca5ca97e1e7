# droidenv/environment/volumes.py
from __future__ import annotations
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

__all__ = [
    "SDK_N",
    "FLAG_FOR_WRITE",
    "StorageVolume",
    "VolumeEnumerator",
    "StaticStorageVolume",
    "StaticVolumeEnumerator",
    "HostCapabilities",
]

# First OS release exposing per-user volume enumeration
SDK_N = 24

# Ask only for volumes the user can write to
FLAG_FOR_WRITE = 1 << 8



@runtime_checkable
class StorageVolume(Protocol):
    """Opaque volume descriptor returned by the host. Some volumes have no path."""
    def getPathFile(self) -> str | os.PathLike[str] | None: ...



@runtime_checkable
class VolumeEnumerator(Protocol):
    """Host capability listing the storage volumes owned by a user."""
    def getVolumeList(self, userHandle: int, flags: int) -> Sequence[StorageVolume]: ...



@dataclass(frozen=True)
class StaticStorageVolume:
    path: str | None
    description: str = ""

    def getPathFile(self) -> str | None:
        return self.path



@dataclass
class StaticVolumeEnumerator:
    """
    Enumerator over a volume table already known to the host (e.g. parsed
    from a mount listing by the privileged I/O layer). Unknown users get no volumes.
    """
    volumes: Mapping[int, Sequence[StorageVolume]] = field(default_factory=dict)

    def getVolumeList(self, userHandle: int, flags: int) -> Sequence[StorageVolume]:
        return list(self.volumes.get(userHandle, ()))



@dataclass(frozen=True)
class HostCapabilities:
    """
    What the running OS exposes to this process.

    sdkInt is None when the OS version is unknown; volume enumeration is
    then never attempted.
    """
    sdkInt: int | None = None
    volumeEnumerator: VolumeEnumerator | None = None

    @property
    def supportsVolumeQuery(self) -> bool:
        return (
            self.volumeEnumerator is not None
            and self.sdkInt is not None
            and self.sdkInt >= SDK_N
        )

    @classmethod
    def none(cls) -> "HostCapabilities":
        return cls()
