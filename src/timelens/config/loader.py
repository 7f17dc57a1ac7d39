"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Environment overrides (TIMELENS_PROFILE, TIMELENS_MONGO_URI, TIMELENS_LOG_LEVEL)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from . import (
    AnalysisConfig,
    CategoryConfig,
    LoggingConfig,
    StorageConfig,
    TimelensConfig,
    default_categories,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "dev"
PROFILE_ENV_VAR = "TIMELENS_PROFILE"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_path = path.parent / base_name
        base_config = load_yaml_with_inheritance(base_path)
        config = deep_merge(base_config, config)

    return config


def _parse_categories(data: dict[str, Any] | None) -> dict[str, CategoryConfig]:
    """Parse category settings, keeping presets not mentioned in the file."""
    categories = default_categories()
    for category_id, values in (data or {}).items():
        values = values or {}
        existing = categories.get(category_id)
        categories[category_id] = CategoryConfig(
            id=category_id,
            name=values.get("name", existing.name if existing else category_id),
            color=values.get("color", existing.color if existing else "#999999"),
            order=int(values.get("order", existing.order if existing else 999)),
        )
    return categories


def dict_to_config(data: dict[str, Any]) -> TimelensConfig:
    """Convert raw dict to typed TimelensConfig dataclass."""
    root = data.get("timelens", {}) or {}

    # YAML gives None for empty sections
    def safe_get(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return TimelensConfig(
        storage=StorageConfig(**safe_get("storage")),
        analysis=AnalysisConfig(**safe_get("analysis")),
        logging=LoggingConfig(**safe_get("logging")),
        categories=_parse_categories(root.get("categories")),
    )


def apply_env_overrides(config: TimelensConfig) -> TimelensConfig:
    """Apply environment variable overrides in place.

    Returns:
        The same config, for chaining
    """
    mongo_uri = os.environ.get("TIMELENS_MONGO_URI", "").strip()
    if mongo_uri:
        config.storage.uri = mongo_uri
    log_level = os.environ.get("TIMELENS_LOG_LEVEL", "").strip()
    if log_level:
        config.logging.level = log_level.upper()
    return config


def detect_profile() -> str:
    """Profile name from TIMELENS_PROFILE, defaulting to dev."""
    return os.environ.get(PROFILE_ENV_VAR, "").strip().lower() or DEFAULT_PROFILE


def _load_env() -> None:
    """Load .env from the project root, then the current directory."""
    project_root = Path(__file__).resolve().parent.parent.parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        logger.debug("Loaded .env from: %s", env_file)
    else:
        load_dotenv()


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> TimelensConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed TimelensConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> TimelensConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'test')

        Returns:
            Parsed TimelensConfig for the profile
        """
        config_path = self._config_dir / f"{profile}.yaml"
        return self.load(config_path)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> TimelensConfig:
    """Load Timelens configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'test') if path not given;
                 falls back to TIMELENS_PROFILE, then 'dev'

    Returns:
        Parsed TimelensConfig with environment overrides applied

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    _load_env()
    loader = YAMLConfigLoader()

    if path is not None:
        config = loader.load(Path(path))
    else:
        config = loader.load_profile(profile or detect_profile())

    return apply_env_overrides(config)


__all__ = [
    "YAMLConfigLoader",
    "apply_env_overrides",
    "deep_merge",
    "detect_profile",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
