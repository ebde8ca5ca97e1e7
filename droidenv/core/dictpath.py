# droidenv/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping, MutableMapping

__all__ = ["getByPath", "setByPath", "hasPath", "deleteByPath"]



# ----------------------------------------------
#                  path parsing
# ----------------------------------------------

def _splitPath(path: str) -> list[str]:
    """
    Splits a dotted settings key into its parts.

    Examples:
      - debug.devModeEnabled -> ["debug", "devModeEnabled"]
      - a..b                 -> ValueError (empty segment)
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")
    parts = path.split(".")
    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



# ----------------------------------------------
#                   Public API
# ----------------------------------------------

def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """
    Returns the value at `path` inside nested mappings, or `default`
    when any hop is missing or not a mapping. Invalid paths count as missing.
    """
    try:
        parts = _splitPath(path)
    except ValueError:
        return default

    current: Any = obj
    for part in parts:
        if isinstance(current, Mapping) and part in current:
            current = current[part]
            continue
        return default
    return current



def setByPath(obj: MutableMapping[str, Any], path: str, value: Any, *, createIfMissing: bool = False) -> None:
    """
    Sets the value at `path`.

    Missing intermediate mappings are created only when createIfMissing=True,
    otherwise KeyError is raised. Writing through a read-only mapping raises TypeError.
    """
    parts = _splitPath(path)

    current: Any = obj
    for part in parts[:-1]:
        if not isinstance(current, Mapping):
            raise TypeError(f"path segment '{part}' is not reachable through {type(current).__name__}")
        if part in current:
            current = current[part]
            continue
        if createIfMissing and isinstance(current, MutableMapping):
            newChild: dict[str, Any] = {}
            current[part] = newChild
            current = newChild
            continue
        raise KeyError(f"path segment '{part}' not found in mapping")

    last = parts[-1]
    if not isinstance(current, MutableMapping):
        raise TypeError(f"Cannot write to '{last}' on read-only {type(current).__name__}")
    current[last] = value



def hasPath(obj: Any, path: str) -> bool:
    defaultNeedle = object() # Unique marker
    return getByPath(obj, path, defaultNeedle) is not defaultNeedle



def deleteByPath(obj: MutableMapping[str, Any], path: str, *, pruneEmptyParents: bool = True) -> bool:
    """
    Deletes the value at `path`. Returns True if something was removed.

    If pruneEmptyParents=True, mappings left empty by the delete are removed
    from their parents, never the root object itself.
    """
    parts = _splitPath(path)

    stack: list[tuple[MutableMapping[str, Any], str]] = []
    current: Any = obj
    for part in parts[:-1]:
        if isinstance(current, MutableMapping) and part in current:
            stack.append((current, part))
            current = current[part]
            continue
        return False

    last = parts[-1]
    if not isinstance(current, MutableMapping) or last not in current:
        return False
    del current[last]

    if pruneEmptyParents:
        for parent, key in reversed(stack):
            child = parent.get(key)
            if isinstance(child, MutableMapping) and len(child) == 0:
                del parent[key]
            else:
                break

    return True
