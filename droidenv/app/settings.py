# droidenv/app/settings.py
from __future__ import annotations
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "SettingsModel", "SETTINGS_DEFAULTS", "SETTINGS_ENV_BINDINGS",
    "ENV_SETTINGS_FILE", "DEFAULT_SETTINGS_FILE", "validateSettings",
]

ENV_SETTINGS_FILE = "DROIDENV_SETTINGS"
DEFAULT_SETTINGS_FILE = Path("~/.droidenv/droidenv.json5")



class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")



class SuppressRecurringSettings(_Section):
    enabled: bool = False
    windowSeconds: int = Field(default=60, ge=1)
    maxPerWindow: int = Field(default=5, ge=1)
    maxKeys: int = Field(default=1024, ge=1)  # Distinct messages tracked at once
    summaryLevel: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"



class DebugSettings(_Section):
    devModeEnabled: bool = False
    suppressRecurringMessages: SuppressRecurringSettings = Field(default_factory=SuppressRecurringSettings)



class LoggingSettings(_Section):
    file: str | None = None             # JSON log file; console only when None



class UserSettings(_Section):
    strictMode: bool = False            # Initial value of setUserRequired() at bootstrap



class SettingsModel(_Section):
    """Schema of the effective droidenv settings document."""
    debug: DebugSettings = Field(default_factory=DebugSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    user: UserSettings = Field(default_factory=UserSettings)



SETTINGS_DEFAULTS: dict[str, Any] = SettingsModel().model_dump()

# settings key -> environment variable
SETTINGS_ENV_BINDINGS: dict[str, str] = {
    "debug.devModeEnabled": "DROIDENV_DEV_MODE",
    "logging.file": "DROIDENV_LOG_FILE",
    "user.strictMode": "DROIDENV_STRICT_USER",
}



def validateSettings(document: Mapping[str, Any]) -> SettingsModel:
    """Raises pydantic.ValidationError when `document` does not match SettingsModel."""
    return SettingsModel.model_validate(dict(document))
