"""Configuration package."""

from opdispatch.config.settings import (
    EngineSettings,
    ReplSettings,
    Settings,
    load_settings,
)

__all__ = [
    "EngineSettings",
    "ReplSettings",
    "Settings",
    "load_settings",
]
