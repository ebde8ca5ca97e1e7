# droidenv/config/store.py
from __future__ import annotations

import logging
from typing import Any, Callable
from collections.abc import Mapping

from droidenv.core.errors import ConfigValidationError
from .providers import OverrideProvider
from .types import ConfigProvider, ChangeListener, Validator

logger = logging.getLogger(__name__)

__all__ = ["ConfigStore", "deepMerge"]



def deepMerge(first: Any, second: Any) -> Any:
    """
    Returns a new value where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are mappings; otherwise `second` wins.
    """
    if isinstance(first, Mapping) and isinstance(second, Mapping):
        out: dict[str, Any] = dict(first)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], value)
            else:
                out[key] = value
        return out
    return second



class ConfigStore:
    """
    Minimal layered config store:
      - read: first-hit from the topmost provider down
      - write: always to the topmost OverrideProvider
      - validate: on set(), validate the *effective* merged document and roll back on failure
    """

    def __init__(self, *, namespace: str, validator: Validator | None, providers: list[ConfigProvider]):
        self.namespace = namespace
        self._validator = validator
        self._providers = providers
        self._listeners: list[ChangeListener] = []

        self._overrideIdx: int | None = None
        for idx in range(len(self._providers) - 1, -1, -1):
            if isinstance(self._providers[idx], OverrideProvider):
                self._overrideIdx = idx
                break

    # ----- Helpers -----

    def _merged(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        # We merge from bottom to top
        for provider in self._providers:
            merged = deepMerge(merged, provider.to_dict())
        return merged

    def validate(self) -> None:
        """Validates the current effective document; raises ConfigValidationError."""
        if self._validator is None:
            return
        try:
            self._validator(self._merged())
        except Exception as err:
            raise ConfigValidationError(f"{self.namespace}: invalid configuration: {err}") from err

    # ----- Public API -----

    def get(self, key: str) -> Any | None:
        for provider in reversed(self._providers): # Topmost first precedence
            value = provider.get(key)
            if value is not None:
                return value
        return None

    def set(self, key: str, value: Any, *, actor: str = "system") -> None:
        if self._overrideIdx is None:
            raise KeyError(f"No writable override layer in {self.namespace}")

        target = self._providers[self._overrideIdx]
        oldValue = self.get(key)
        previousLayerValue = target.get(key)
        target.set(key, value)

        try:
            self.validate()
        except ConfigValidationError:
            # rollback only the override layer
            target.set(key, previousLayerValue)
            raise

        newValue = self.get(key)
        if oldValue != newValue:
            context = {"namespace": self.namespace, "actor": actor}
            for fn in list(self._listeners):
                try:
                    fn(key, oldValue, newValue, context)
                except Exception:
                    # Listeners should not break the store
                    logger.exception("%s: change listener failed for '%s'", self.namespace, key)

    def subscribe(self, fn: ChangeListener) -> Callable[[], None]:
        self._listeners.append(fn)
        def _unsub() -> None:
            try:
                self._listeners.remove(fn)
            except ValueError:
                pass
        return _unsub

    def snapshot(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "values": self._merged(),
            "layers": [provider.__class__.__name__ for provider in self._providers],
        }
