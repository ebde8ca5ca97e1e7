# droidenv/config/types.py
from __future__ import annotations
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

__all__ = ["ConfigProvider", "ChangeListener", "Validator"]

# (key, oldValue, newValue, context)
ChangeListener = Callable[[str, Any, Any, dict[str, Any]], None]

# Receives the effective merged document, raises when it is invalid
Validator = Callable[[Mapping[str, Any]], Any]



class ConfigProvider(ABC):
    """One layer of a ConfigStore. Reads return None for missing keys."""

    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def to_dict(self) -> Mapping[str, Any]: ...

    def save(self) -> None:
        return
