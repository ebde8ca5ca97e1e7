# droidenv/config/providers.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Any, cast
from collections.abc import Mapping
from pathlib import Path
import copy
import logging

import json5

from droidenv.core.dictpath import getByPath, setByPath, deleteByPath
from .types import ConfigProvider

logger = logging.getLogger(__name__)

__all__ = [
    "OverrideProvider", "DictProvider", "DefaultsProvider",
    "EnvironmentProvider", "parseEnvBool",
]

# ----------------------------------------------
#          OverrideProvider (in-memory)
# ----------------------------------------------

class OverrideProvider(ConfigProvider):
    """
    Volatile, writable, topmost override layer (never saved to disk).
    """
    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return getByPath(self._data, key, None)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            deleteByPath(self._data, key, pruneEmptyParents=True)
            return

        setByPath(self._data, key, copy.deepcopy(value), createIfMissing=True)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


# ----------------------------------------------
#       Read-only dict (shipped defaults)
# ----------------------------------------------

@dataclass
class DictProvider(ConfigProvider):
    """
    Read-only mapping: (e.g., compiled-in defaults).
    """
    data: Mapping[str, Any]

    def get(self, key: str) -> Any | None:
        return getByPath(self.data, key, None)

    def set(self, key: str, value: Any) -> None:
        raise RuntimeError("DictProvider is read-only")

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.data))



class DefaultsProvider(ConfigProvider):
    """
    Read-only provider for a settings document.

    Can be initialized either from a JSON/JSON5 file (via `path`)
    or from an in-memory mapping (via `data`).

    If strict=True (default), a missing file raises FileNotFoundError.
    If strict=False, a missing file results in an empty mapping.

    Example:
        DefaultsProvider(path="~/.droidenv/droidenv.json5", strict=False)
        DefaultsProvider(data={"user": {"strictMode": True}})

    Raises:
        ValueError: if neither `data` nor `path` is provided, or both are
        FileNotFoundError: if file is missing and strict=True
        TypeError: if loaded `data` is not a Mapping
    """
    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        path: Path | str | None = None,
        strict: bool = True
    ) -> None:
        if data is not None and path is not None:
            raise ValueError(f"{type(self).__name__}: provide either 'data' or 'path', not both")

        self.path: Path | None = None
        if path is not None:
            path = Path(path).expanduser()
            self.path = path

            if not path.exists():
                if strict:
                    raise FileNotFoundError(f"{type(self).__name__}: settings file '{path}' not found")
                logger.debug("%s: '%s' is missing, starting as empty dict", type(self).__name__, path)
                self.data: Mapping[str, Any] = {}
                return

            if not path.is_file():
                raise FileNotFoundError(f"{type(self).__name__}: '{str(path)}' is not a file")

            try:
                parsed = json5.loads(path.read_text("utf-8"))
            except Exception as err:
                raise TypeError(f"{type(self).__name__}: failed to parse '{path}': {err}") from err

            if parsed is None:
                parsed = {}

            if not isinstance(parsed, Mapping):
                raise TypeError(
                    f"{type(self).__name__}: file content must be a JSON object, not '{type(parsed).__name__}'"
                )

            self.data = cast(Mapping[str, Any], parsed)

        elif data is not None:
            if not isinstance(data, Mapping):
                raise TypeError(f"{type(self).__name__}: 'data' must be a Mapping, not '{type(data).__name__}'")
            self.data = data

        else:
            raise ValueError(f"{type(self).__name__}: either 'data' or 'path' must be provided")

    def get(self, key: str) -> Any | None:
        return getByPath(self.data, key, None)

    def set(self, key: str, value: Any) -> None:
        raise RuntimeError(f"{type(self).__name__}: is read-only")

    def to_dict(self) -> dict[str, Any]:
        # Always return a deep copy to prevent accidental mutation
        return copy.deepcopy(dict(self.data))


# ----------------------------------------------
#     Environment (read-only, process env)
# ----------------------------------------------

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})



def parseEnvBool(raw: str) -> bool | None:
    """Returns True/False for common spellings, None when `raw` is not a boolean."""
    lowered = raw.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    return None



@dataclass
class EnvironmentProvider(ConfigProvider):
    """
    Read-only view over an environment mapping (os.environ by default).

    Serves two purposes:
      • lookup(name): raw variable access used by the path resolvers.
        Empty values are reported as absent.
      • get(key): settings keys bound to variables through `bindings`
        (settings key -> variable name). "true"/"false"-like values become bools.

    The mapping is read live, so tests can monkeypatch os.environ.
    """
    environ: Mapping[str, str] | None = None
    bindings: Mapping[str, str] = field(default_factory=dict)

    @property
    def _env(self) -> Mapping[str, str]:
        return os.environ if self.environ is None else self.environ

    def lookup(self, name: str) -> str | None:
        value = self._env.get(name)
        if value is None or value == "":
            return None
        return value

    def get(self, key: str) -> Any | None:
        varName = self.bindings.get(key)
        if varName is None:
            return None
        raw = self.lookup(varName)
        if raw is None:
            return None
        asBool = parseEnvBool(raw)
        return raw if asBool is None else asBool

    def set(self, key: str, value: Any) -> None:
        raise RuntimeError("EnvironmentProvider is read-only")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in self.bindings:
            value = self.get(key)
            if value is not None:
                setByPath(out, key, value, createIfMissing=True)
        return out
