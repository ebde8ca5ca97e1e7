# droidenv/environment/pathbuilder.py
from __future__ import annotations
import os
from collections.abc import Iterable
from pathlib import Path

from droidenv.core.errors import InvalidArgumentError

__all__ = ["PathLikeStr", "validateSegment", "buildPath", "buildPaths"]

PathLikeStr = str | os.PathLike[str]

# Segments that would leave or alias the directory they are joined onto
_FORBIDDEN_SEGMENTS = frozenset({".", ".."})



def validateSegment(segment: object) -> str:
    """
    Returns `segment` unchanged if it names exactly one path component.

    Rejects None, non-strings, "", "." and "..", and anything containing "/" or NUL.
    A leading "/" would make pathlib drop everything joined so far, and
    an embedded "/" would add components the caller never asked for.
    """
    if segment is None:
        raise InvalidArgumentError("Path segment must not be None")
    if not isinstance(segment, str):
        raise InvalidArgumentError(f"Path segment must be a string, not '{type(segment).__name__}'")
    if segment == "":
        raise InvalidArgumentError("Path segment must not be empty")
    if segment in _FORBIDDEN_SEGMENTS:
        raise InvalidArgumentError(f"Path segment '{segment}' is not allowed")
    if "/" in segment or "\x00" in segment:
        raise InvalidArgumentError(f"Path segment '{segment}' must be a single path component")
    return segment



def _asBase(base: object) -> Path:
    if base is None:
        raise InvalidArgumentError("Base path must not be None")
    if not isinstance(base, (str, os.PathLike)):
        raise InvalidArgumentError(f"Base path must be str or PathLike, not '{type(base).__name__}'")
    if isinstance(base, str) and base == "":
        raise InvalidArgumentError("Base path must not be empty")
    return Path(base).absolute()



def buildPath(base: PathLikeStr, *segments: str) -> Path:
    """
    Append path segments to the absolute form of `base`, in order.

    Example:
        buildPath("/storage/emulated/0", "Android", "data", "com.example")
        # -> /storage/emulated/0/Android/data/com.example
    """
    current = _asBase(base)
    for segment in segments:
        current = current / validateSegment(segment)
    return current



def buildPaths(bases: Iterable[PathLikeStr], *segments: str) -> list[Path]:
    """
    Append path segments to each given base path, returning results in input order.
    """
    for segment in segments:
        validateSegment(segment)
    return [buildPath(base, *segments) for base in bases]
