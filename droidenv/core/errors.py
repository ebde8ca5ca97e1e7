# droidenv/core/errors.py
from __future__ import annotations

from typing import Literal

__all__ = [
    "DroidEnvError", "InvalidArgumentError", "CapabilityUnavailableError",
    "CapabilityReason", "UserContextError", "ConfigValidationError",
]



class DroidEnvError(Exception):
    """Base class for every error raised by droidenv."""
    pass



class InvalidArgumentError(DroidEnvError, ValueError):
    """Raised when a caller passes a path segment or user handle that cannot be used safely."""
    pass



CapabilityReason = Literal["notFound", "accessDenied", "invocationFailed", "noPaths"]



class CapabilityUnavailableError(DroidEnvError):
    """
    Raised by the volume-query strategy when the host cannot answer.
    Never escapes UserEnvironment.getExternalDirs(); it only selects the fallback.
    """
    def __init__(self, reason: CapabilityReason, message: str = "") -> None:
        super().__init__(message or reason)
        self.reason: CapabilityReason = reason



class UserContextError(DroidEnvError, RuntimeError):
    """Raised when the process-wide user context is read before it was bootstrapped."""
    pass



class ConfigValidationError(DroidEnvError, ValueError):
    """Raised when the effective settings document fails validation."""
    pass
