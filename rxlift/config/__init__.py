"""
Configuration Management

Centralized configuration for:
- Audience sizing constants
- Identity match pacing
- Lift defaults
- Store backends
- Logging
"""

from .settings import (
    Settings,
    SizingConfig,
    MatchConfig,
    LiftConfig,
    StoreConfig,
    StoreBackendType,
    get_settings
)
from .logging_setup import configure_logging

__all__ = [
    "Settings",
    "SizingConfig",
    "MatchConfig",
    "LiftConfig",
    "StoreConfig",
    "StoreBackendType",
    "get_settings",
    "configure_logging"
]
