"""Unit tests for settings loading and validation."""
import pytest
from dataclasses import FrozenInstanceError

from datamigrate.config.defaults import DEFAULT_SETTINGS, ENV_KEYS
from datamigrate.config.settings import (
    MigrationSettings, SettingsValidator, get_env_var, load_env_file, load_settings
)
from datamigrate.core.exceptions import ConfigurationError


class TestMigrationSettings:

    def test_defaults(self):
        settings = MigrationSettings()
        assert settings.to_dict() == DEFAULT_SETTINGS

    def test_immutable(self):
        with pytest.raises(FrozenInstanceError):
            MigrationSettings().allow_partial = True

    def test_with_overrides(self):
        settings = MigrationSettings().with_overrides(path_strategy="greedy")
        assert settings.path_strategy == "greedy"
        assert settings.strict_registration is True

    @pytest.mark.parametrize("field, value", [("path_strategy", "dijkstra"), ("log_level", "LOUD")])
    def test_invalid_choice_rejected(self, field, value):
        with pytest.raises(ConfigurationError):
            MigrationSettings(**{field: value})

    def test_env_keys(self):
        assert ENV_KEYS["allow_partial"] == "DATAMIGRATE_ALLOW_PARTIAL"


class TestSettingsValidator:

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("YES", True), (" 1 ", True), ("on", True),
        ("false", False), ("No", False), ("0", False), ("off", False),
    ])
    def test_validate_bool(self, raw, expected):
        assert SettingsValidator.validate_bool("flag", raw) is expected

    def test_validate_bool_rejects_garbage(self):
        with pytest.raises(ConfigurationError):
            SettingsValidator.validate_bool("flag", "maybe")


class TestEnvFile:

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_env_file(tmp_path / "absent.env") == {}

    def test_parses_lines(self, env_file):
        path = env_file(
            "# settings\n"
            "\n"
            "DATAMIGRATE_PATH_STRATEGY=greedy\n"
            "DATAMIGRATE_VERSION_KEY=\"config_version\"\n"
            "QUOTED='a=b'\n"
            "not a pair\n"
        )

        assert load_env_file(path) == {
            "DATAMIGRATE_PATH_STRATEGY": "greedy",
            "DATAMIGRATE_VERSION_KEY": "config_version",
            "QUOTED": "a=b",
        }

    def test_get_env_var_prefers_file(self, monkeypatch):
        monkeypatch.setenv("DATAMIGRATE_LOG_LEVEL", "DEBUG")
        assert get_env_var("DATAMIGRATE_LOG_LEVEL", env_vars={"DATAMIGRATE_LOG_LEVEL": "ERROR"}) == "ERROR"
        assert get_env_var("DATAMIGRATE_LOG_LEVEL") == "DEBUG"
        assert get_env_var("DATAMIGRATE_MISSING", "fallback") == "fallback"


class TestLoadSettings:

    def test_defaults_without_environment(self, tmp_path):
        assert load_settings(tmp_path / ".env") == MigrationSettings()

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATAMIGRATE_PATH_STRATEGY", "Greedy")
        monkeypatch.setenv("DATAMIGRATE_ALLOW_PARTIAL", "yes")
        monkeypatch.setenv("DATAMIGRATE_LOG_LEVEL", "debug")

        settings = load_settings(tmp_path / ".env")

        assert settings.path_strategy == "greedy"
        assert settings.allow_partial is True
        assert settings.log_level == "DEBUG"

    def test_from_env_file(self, env_file):
        path = env_file(
            "DATAMIGRATE_STRICT_REGISTRATION=false\n"
            "DATAMIGRATE_STRUCTURED_LOGGING=true\n"
            "DATAMIGRATE_VERSION_KEY=\n"
        )

        settings = load_settings(path)

        assert settings.strict_registration is False
        assert settings.structured_logging is True
        assert settings.version_key is None

    def test_file_overrides_environment(self, monkeypatch, env_file):
        monkeypatch.setenv("DATAMIGRATE_PATH_STRATEGY", "greedy")
        path = env_file("DATAMIGRATE_PATH_STRATEGY=shortest\n")

        assert load_settings(path).path_strategy == "shortest"

    @pytest.mark.parametrize("key, value", [
        ("DATAMIGRATE_PATH_STRATEGY", "random"),
        ("DATAMIGRATE_ALLOW_PARTIAL", "sometimes"),
        ("DATAMIGRATE_LOG_LEVEL", "VERBOSE"),
    ])
    def test_invalid_values_raise(self, monkeypatch, tmp_path, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / ".env")
