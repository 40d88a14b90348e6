#!/usr/bin/env python3
"""Tests for the ConfigManager module."""

import pytest
import yaml

from torrtree.core.constants import ErrorCode
from torrtree.infrastructure.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    default_config_paths,
    get_config_manager,
    set_global_config,
)


class TestConfigSource:
    """Tests for ConfigSource enum."""

    def test_precedence_order(self):
        """Sources are ordered from defaults to runtime."""
        sources = list(ConfigSource)
        assert sources[0] == ConfigSource.COMPILED_DEFAULTS
        assert sources[-1] == ConfigSource.RUNTIME
        for lower, higher in zip(sources, sources[1:]):
            assert lower.value < higher.value


class TestConfigError:
    """Tests for ConfigError exception."""

    def test_config_error_creation(self):
        """Stores message and code."""
        error = ConfigError("Test error", ErrorCode.NOT_FOUND)
        assert error.message == "Test error"
        assert error.error_code == ErrorCode.NOT_FOUND
        assert str(error) == "Test error"

    def test_config_error_default_code(self):
        """Defaults to INVALID_INPUT."""
        assert ConfigError("x").error_code == ErrorCode.INVALID_INPUT


class TestDefaults:
    """Tests for compiled defaults."""

    def test_defaults(self, config):
        """Compiled defaults are available."""
        assert config.get("torrtree.tree.icons") is True
        assert config.get("torrtree.tree.warn_overdownload") is True
        assert config.get("torrtree.logging.level") == "INFO"

    def test_missing_key_returns_default(self, config):
        """Unknown keys return the given default."""
        assert config.get("torrtree.tree.unknown", "fallback") == "fallback"
        assert config.get("torrtree.tree.icons.deeper") is None

    def test_defaults_not_shared(self):
        """Runtime changes never leak into the class defaults."""
        first = ConfigManager(load_environment=False)
        first.set("torrtree.tree.icons", False, ConfigSource.COMPILED_DEFAULTS)
        second = ConfigManager(load_environment=False)
        assert second.get("torrtree.tree.icons") is True


class TestLoadFile:
    """Tests for YAML file loading."""

    def test_load_file(self, config, config_file):
        """Values from the file override defaults."""
        config.load_file(str(config_file))
        assert config.get("torrtree.tree.icons") is False
        assert config.get("torrtree.logging.level") == "DEBUG"
        # untouched defaults survive
        assert config.get("torrtree.tree.warn_overdownload") is True

    def test_constructor_loads_file(self, config_file):
        """config_file argument is loaded on construction."""
        manager = ConfigManager(str(config_file), load_environment=False)
        assert manager.get("torrtree.tree.icons") is False

    def test_missing_file(self, config, temp_dir):
        """Missing file raises NOT_FOUND."""
        with pytest.raises(ConfigError) as exc_info:
            config.load_file(str(temp_dir / "absent.yaml"))
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_invalid_yaml(self, config, temp_dir):
        """YAML syntax errors are reported."""
        path = temp_dir / "bad.yaml"
        path.write_text("torrtree: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            config.load_file(str(path))

    def test_non_mapping(self, config, temp_dir):
        """Top level must be a mapping."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Invalid config format"):
            config.load_file(str(path))

    def test_invalid_values(self, config, temp_dir):
        """Schema errors are reported as ConfigError."""
        path = temp_dir / "invalid.yaml"
        path.write_text(yaml.dump({"torrtree": {"tree": {"icons": "sometimes"}}}))
        with pytest.raises(ConfigError, match="Invalid configuration"):
            config.load_file(str(path))


class TestEnvironment:
    """Tests for TORRTREE_* environment variables."""

    def test_environment_override(self, monkeypatch, config_file):
        """Environment beats user config files."""
        monkeypatch.setenv("TORRTREE_TREE_ICONS", "yes")
        monkeypatch.setenv("TORRTREE_TREE_WARN_OVERDOWNLOAD", "0")
        manager = ConfigManager(str(config_file))
        assert manager.get("torrtree.tree.icons") is True
        assert manager.get("torrtree.tree.warn_overdownload") is False

    def test_malformed_variables_ignored(self, monkeypatch):
        """Variables without a section and key are skipped."""
        monkeypatch.setenv("TORRTREE_", "x")
        monkeypatch.setenv("TORRTREE_TREE", "x")
        manager = ConfigManager()
        assert ConfigSource.ENVIRONMENT not in manager._config

    def test_invalid_log_level_rejected(self, monkeypatch):
        """An unknown level in the environment is a config error."""
        monkeypatch.setenv("TORRTREE_LOGGING_LEVEL", "verbose")
        with pytest.raises(ConfigError, match="TORRTREE_\\* environment: Invalid log level"):
            ConfigManager()

    def test_non_boolean_switch_rejected(self, monkeypatch):
        """Tree switches must parse as booleans."""
        monkeypatch.setenv("TORRTREE_TREE_ICONS", "maybe")
        with pytest.raises(ConfigError, match="Tree icons must be boolean: maybe"):
            ConfigManager()

    def test_environment_skipped_when_disabled(self, monkeypatch):
        """Invalid variables are not read with load_environment=False."""
        monkeypatch.setenv("TORRTREE_TREE_ICONS", "maybe")
        assert ConfigManager(load_environment=False).get("torrtree.tree.icons") is True

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("No", False),
            ("42", 42),
            ("2.5", 2.5),
            ("DEBUG", "DEBUG"),
        ],
    )
    def test_parse_env_value(self, config, raw, expected):
        """Values are parsed into bool, int, float or str."""
        assert config._parse_env_value(raw) == expected


class TestSetAndMerge:
    """Tests for runtime updates and merging."""

    def test_set_overrides(self, config):
        """Runtime values have highest precedence."""
        config.load_dict({"torrtree": {"tree": {"icons": True}}}, ConfigSource.CLI_ARGS)
        config.set("torrtree.tree.icons", False)
        assert config.get("torrtree.tree.icons") is False

    def test_get_all_deep_merges(self, config):
        """get_all merges nested sections."""
        config.load_dict({"torrtree": {"logging": {"level": "ERROR"}}})
        merged = config.get_all()
        assert merged["torrtree"]["logging"] == {"level": "ERROR", "file": None}
        assert merged["torrtree"]["tree"]["icons"] is True

    def test_watchers(self, config):
        """Watchers receive the merged configuration on change."""
        seen = []
        config.add_watcher(seen.append)
        config.set("torrtree.logging.level", "ERROR")
        assert seen[-1]["torrtree"]["logging"]["level"] == "ERROR"

        config.load_dict({"torrtree": {"tree": {"icons": False}}})
        assert len(seen) == 2
        assert seen[-1]["torrtree"]["tree"]["icons"] is False


class TestGlobalConfig:
    """Tests for the global configuration accessors."""

    def test_default_config_paths(self):
        """System config comes before user config."""
        (system_path, system_source), (user_path, user_source) = default_config_paths()
        assert system_path == "/etc/torrtree/config.yaml"
        assert system_source == ConfigSource.SYSTEM_CONFIG
        assert user_path.endswith(".config/torrtree/config.yaml")
        assert user_source == ConfigSource.USER_CONFIG

    def test_get_config_manager_singleton(self):
        """The global manager is created once."""
        assert get_config_manager() is get_config_manager()

    def test_set_global_config(self, config):
        """An explicitly set manager is returned."""
        set_global_config(config)
        assert get_config_manager() is config
