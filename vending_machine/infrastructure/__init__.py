"""
Infrastructure layer - Configuration.
"""

from .settings import (
    LoggingSettings,
    Settings,
    StockSettings,
    get_settings,
)


__all__ = [
    "LoggingSettings",
    "Settings",
    "StockSettings",
    "get_settings",
]
