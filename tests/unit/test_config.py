"""Unit tests for configuration loading and profile management."""

import os
import tempfile
from pathlib import Path
from unittest import mock

import pytest
import yaml

from timelens.config import TimelensConfig
from timelens.config.categories import DEFAULT_ORDER, UNSET_COLOR, CategoryRegistry
from timelens.config.loader import (
    YAMLConfigLoader,
    apply_env_overrides,
    deep_merge,
    detect_profile,
    dict_to_config,
    load_config,
    load_yaml_with_inheritance,
)

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_simple_merge(self) -> None:
        """Test merging flat dictionaries."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        """Test merging nested dictionaries."""
        base = {"outer": {"a": 1, "b": 2}}
        override = {"outer": {"b": 3, "c": 4}}
        assert deep_merge(base, override) == {"outer": {"a": 1, "b": 3, "c": 4}}

    def test_override_replaces_non_dict(self) -> None:
        """Test that non-dict values are replaced."""
        assert deep_merge({"a": {"nested": 1}}, {"a": "replaced"}) == {"a": "replaced"}


class TestYAMLLoading:
    """Tests for YAML config loading."""

    def test_load_with_inheritance(self) -> None:
        """Test loading YAML with extends keyword."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base_path = Path(tmpdir) / "base.yaml"
            with open(base_path, "w") as f:
                yaml.dump(
                    {"timelens": {"analysis": {"sensitivity": "loose", "lookback_days": 14}}},
                    f,
                )

            child_path = Path(tmpdir) / "child.yaml"
            with open(child_path, "w") as f:
                yaml.dump(
                    {"extends": "base.yaml", "timelens": {"analysis": {"sensitivity": "strict"}}},
                    f,
                )

            result = load_yaml_with_inheritance(child_path)
            assert result["timelens"]["analysis"]["sensitivity"] == "strict"
            assert result["timelens"]["analysis"]["lookback_days"] == 14

    def test_file_not_found(self) -> None:
        """Test FileNotFoundError for missing config."""
        with pytest.raises(FileNotFoundError):
            load_yaml_with_inheritance(Path("/nonexistent/config.yaml"))


class TestDictToConfig:
    """Tests for converting dict to TimelensConfig."""

    def test_empty_dict(self) -> None:
        """Test conversion of empty dict uses defaults."""
        config = dict_to_config({})
        assert config.storage.database == "timelens"
        assert config.analysis.sensitivity == "standard"
        assert config.analysis.suggestion_limit == 10
        assert set(config.categories) == {
            "study",
            "work",
            "daily",
            "exercise",
            "rest",
            "entertainment",
        }

    def test_partial_override(self) -> None:
        """Test partial config override."""
        config = dict_to_config({"timelens": {"analysis": {"timezone": "Asia/Shanghai"}}})
        assert config.analysis.timezone == "Asia/Shanghai"
        assert config.analysis.lookback_days == 30

    def test_custom_categories(self) -> None:
        """Test configured categories extend the presets."""
        data = {
            "timelens": {
                "categories": {"reading": {"name": "Reading", "color": "#123456", "order": 1}}
            }
        }
        config = dict_to_config(data)
        assert "reading" in config.categories
        assert "study" in config.categories
        assert config.categories["reading"].color == "#123456"


class TestYAMLConfigLoader:
    """Tests for YAMLConfigLoader class."""

    def test_load_dev_profile(self) -> None:
        """Test loading dev profile from the project config directory."""
        if not CONFIG_DIR.exists():
            pytest.skip("Config directory not found")

        config = YAMLConfigLoader(CONFIG_DIR).load_profile("dev")

        assert isinstance(config, TimelensConfig)
        assert config.logging.level == "DEBUG"
        assert config.storage.database == "timelens_dev"

    def test_load_test_profile(self) -> None:
        """Test loading the test profile."""
        if not CONFIG_DIR.exists():
            pytest.skip("Config directory not found")

        config = YAMLConfigLoader(CONFIG_DIR).load_profile("test")

        assert config.storage.database == "timelens_test"
        assert config.storage.max_retries == 1
        assert config.analysis.timezone == "UTC"

    def test_get_config_dir(self) -> None:
        """Test get_config_dir returns correct path."""
        custom_dir = Path("/custom/config")
        assert YAMLConfigLoader(custom_dir).get_config_dir() == custom_dir


class TestEnvironment:
    """Tests for environment-driven settings."""

    def test_detect_profile_from_env(self) -> None:
        """Test profile detection from environment variable."""
        with mock.patch.dict(os.environ, {"TIMELENS_PROFILE": "test"}):
            assert detect_profile() == "test"

    def test_detect_profile_default_dev(self) -> None:
        """Test the default profile is dev."""
        with mock.patch.dict(os.environ, {}, clear=True):
            assert detect_profile() == "dev"

    def test_env_overrides(self) -> None:
        """Test URI and log level overrides."""
        env = {"TIMELENS_MONGO_URI": "mongodb://db:27017", "TIMELENS_LOG_LEVEL": "warning"}
        with mock.patch.dict(os.environ, env):
            config = apply_env_overrides(TimelensConfig())
        assert config.storage.uri == "mongodb://db:27017"
        assert config.logging.level == "WARNING"

    def test_load_config_by_profile(self) -> None:
        """Test the load_config convenience function."""
        if not CONFIG_DIR.exists():
            pytest.skip("Config directory not found")

        with mock.patch.dict(os.environ, {}, clear=True):
            config = load_config(profile="test")
        assert isinstance(config, TimelensConfig)


class TestCategoryRegistry:
    """Tests for CategoryRegistry lookups."""

    def test_known_category(self) -> None:
        """Test preset order and color."""
        registry = CategoryRegistry()
        assert registry.order_of("work") == 2
        assert registry.color_of("work") == "#40A9FF"
        assert registry.name_of("work") == "Work"

    def test_unknown_category_falls_back(self) -> None:
        """Test unknown ids never raise."""
        registry = CategoryRegistry()
        assert registry.order_of("missing") == DEFAULT_ORDER
        assert registry.color_of("missing") == UNSET_COLOR
        assert registry.color_of(None, "#000000") == "#000000"
        assert registry.name_of("missing") is None

    def test_all_in_order(self) -> None:
        """Test categories are listed by display order."""
        assert [c.id for c in CategoryRegistry().all()][:2] == ["study", "work"]
