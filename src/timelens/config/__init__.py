"""Configuration module for Timelens.

This module provides configuration dataclasses, category display settings
and profile-based loading.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class StorageConfig:
    """MongoDB connection configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "timelens"
    max_pool_size: int = 50
    min_pool_size: int = 0
    connect_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000
    max_retries: int = 5
    retry_base_delay: float = 1.0


@dataclass
class AnalysisConfig:
    """Analytics engine defaults."""

    sensitivity: str = "standard"
    lookback_days: int = 30
    suggestion_limit: int = 10
    timezone: str | None = None  # IANA name; None means the system zone
    week_starts_on: str = "sunday"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class CategoryConfig:
    """Display settings for one category."""

    id: str
    name: str
    color: str
    order: int


def default_categories() -> dict[str, CategoryConfig]:
    return {
        "study": CategoryConfig("study", "Study", "#1890FF", 1),
        "work": CategoryConfig("work", "Work", "#40A9FF", 2),
        "daily": CategoryConfig("daily", "Daily", "#FFA940", 3),
        "exercise": CategoryConfig("exercise", "Exercise", "#FF7A45", 4),
        "rest": CategoryConfig("rest", "Rest", "#9254DE", 5),
        "entertainment": CategoryConfig("entertainment", "Entertainment", "#B37FEB", 6),
    }


@dataclass
class TimelensConfig:
    """Main Timelens configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    categories: dict[str, CategoryConfig] = field(default_factory=default_categories)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> TimelensConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> TimelensConfig:
        """Load configuration by profile name (dev, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "AnalysisConfig",
    "CategoryConfig",
    "ConfigLoader",
    "default_categories",
    "LoggingConfig",
    "StorageConfig",
    "TimelensConfig",
]
