"""
Application settings.

Provides type-safe configuration grouped into frozen dataclass sections.
"""

from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# Configuration Classes
# =============================================================================


@dataclass(frozen=True)
class StockSettings:
    """Initial stock seeded on machine start and on reset."""

    initial_coin_count: int = 10
    initial_item_count: int = 5


@dataclass(frozen=True)
class LoggingSettings:
    """Logging configuration."""

    level: str = "DEBUG"
    app: str = "vending_machine"
    log_file: Optional[str] = None
    loki_url: Optional[str] = None


# =============================================================================
# Main Settings
# =============================================================================


@dataclass
class Settings:
    """
    Main application settings.

    Aggregates all configuration sections.
    """

    stock: StockSettings = field(default_factory=StockSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# Settings Singleton
# =============================================================================


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
