"""Integration tests for configuration module."""

import pytest

from dossier_import.config import (
    DEFAULT_DATABASE_URL,
    ConfigurationError,
    ImportConfig,
    load_config,
    load_environment_config,
)
from dossier_import.config.validators import check_for_warnings

ENV_VARS = ("DATABASE_URL", "LOG_LEVEL", "IMPORT_STRICT_MODE", "ENVIRONMENT")


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every variable the loader reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _write(tmp_path, content, name="config.yaml"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, tmp_path, clean_env):
        """Test loading a complete configuration file."""
        path = _write(tmp_path, """
logging:
  level: DEBUG
  format: json
validation:
  strict_mode: true
normalization:
  default_ai_model: "  gpt-dossier  "
pipeline:
  cache_size: 8
persistence:
  enabled: false
""")

        with pytest.warns(UserWarning, match="DEBUG"):
            app_config, env_config = load_config(path)

        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert app_config.validation.strict_mode is True
        assert app_config.normalization.default_ai_model == "gpt-dossier"
        assert app_config.normalization.default_validation_level == "automatique"
        assert app_config.pipeline.cache_size == 8
        assert app_config.persistence.enabled is False
        assert app_config.persistence.record_runs is True
        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_defaults_without_file(self, tmp_path, clean_env):
        """Test that built-in defaults apply when no config file exists."""
        clean_env.chdir(tmp_path)

        app_config, env_config = load_config()

        assert app_config == ImportConfig()
        assert app_config.logging.level == "INFO"
        assert app_config.pipeline.cache_size == 32
        assert env_config.environment == "local"

    def test_default_candidate_found(self, tmp_path, clean_env):
        (tmp_path / "config").mkdir()
        _write(tmp_path / "config", "pipeline:\n  cache_size: 0\n")
        clean_env.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config.pipeline.cache_size == 0

    def test_empty_file_means_defaults(self, tmp_path, clean_env):
        app_config, _ = load_config(_write(tmp_path, ""))
        assert app_config == ImportConfig()

    def test_config_file_not_found(self, tmp_path, clean_env):
        """Test error when an explicit config file doesn't exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nonexistent.yaml")

        assert "not found" in str(exc_info.value).lower()

    def test_invalid_yaml_syntax(self, tmp_path, clean_env):
        """Test error when YAML syntax is invalid."""
        path = _write(tmp_path, "logging:\n  level: 'INFO\n    broken")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "parse" in str(exc_info.value).lower()

    def test_top_level_list_rejected(self, tmp_path, clean_env):
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(_write(tmp_path, "- logging\n- pipeline\n"))


class TestConfigurationValidation:
    """Test configuration validation rules."""

    def test_unknown_key(self, tmp_path, clean_env):
        path = _write(tmp_path, "scan_interval: 15m\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "Unknown configuration key: scan_interval" in exc_info.value.errors

    def test_invalid_log_level(self, tmp_path, clean_env):
        path = _write(tmp_path, "logging:\n  level: LOUD\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert any("logging -> level" in error for error in exc_info.value.errors)

    def test_cache_size_out_of_range(self, tmp_path, clean_env):
        path = _write(tmp_path, "pipeline:\n  cache_size: -1\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert any("cache_size" in error for error in exc_info.value.errors)

    def test_whitespace_sentinel_rejected(self, tmp_path, clean_env):
        path = _write(tmp_path, "normalization:\n  default_validation_level: '   '\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_all_errors_reported_together(self, tmp_path, clean_env):
        path = _write(tmp_path, "pipeline:\n  cache_size: many\nlogging:\n  level: LOUD\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert len(exc_info.value.errors) == 2
        assert "Suggestions:" in str(exc_info.value)

    def test_persistence_settings(self, tmp_path, clean_env):
        path = _write(tmp_path, "persistence:\n  sqlite_timeout: 5\n  sqlite_journal_mode: WAL\n")

        app_config, _ = load_config(path)

        assert app_config.persistence.sqlite_timeout == 5
        assert app_config.persistence.sqlite_journal_mode == "WAL"
        assert app_config.persistence.echo_sql is False

    def test_unknown_journal_mode(self, tmp_path, clean_env):
        path = _write(tmp_path, "persistence:\n  sqlite_journal_mode: OFF_THE_BOOKS\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert any("persistence -> sqlite_journal_mode" in error for error in exc_info.value.errors)

    def test_error_names_the_file(self, tmp_path, clean_env):
        path = _write(tmp_path, "pipeline:\n  cache_size: -1\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert exc_info.value.source == path
        assert str(exc_info.value).startswith(f"Configuration validation failed ({path})")
        assert "Validation Errors:" in str(exc_info.value)


class TestConfigurationWarnings:
    def test_no_warnings_for_defaults(self):
        assert check_for_warnings({}) == []

    def test_large_cache(self):
        warnings = check_for_warnings({"pipeline": {"cache_size": 2048}})
        assert warnings == ["Large pipeline.cache_size (2048) keeps many documents in memory"]

    def test_record_runs_without_persistence(self):
        warnings = check_for_warnings({"persistence": {"enabled": False, "record_runs": True}})
        assert len(warnings) == 1
        assert "record_runs is ignored" in warnings[0]


class TestEnvironmentVariables:
    """Test environment variable loading."""

    def test_defaults(self, clean_env):
        env_config = load_environment_config()

        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None
        assert env_config.strict_mode is None
        assert env_config.environment == "local"

    def test_values_read(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite:///:memory:")
        clean_env.setenv("LOG_LEVEL", "warning")
        clean_env.setenv("IMPORT_STRICT_MODE", "yes")
        clean_env.setenv("ENVIRONMENT", "staging")

        env_config = load_environment_config()

        assert env_config.database_url == "sqlite:///:memory:"
        assert env_config.log_level == "WARNING"
        assert env_config.strict_mode is True
        assert env_config.environment == "staging"

    def test_invalid_values_collected(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "LOUD")
        clean_env.setenv("IMPORT_STRICT_MODE", "maybe")
        clean_env.setenv("DATABASE_URL", "  ")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 3

    @pytest.mark.parametrize("value,expected", [("true", True), ("0", False), ("Off", False)])
    def test_strict_mode_overrides_file(self, tmp_path, clean_env, value, expected):
        path = _write(tmp_path, "validation:\n  strict_mode: true\n" if not expected else "{}\n")
        clean_env.setenv("IMPORT_STRICT_MODE", value)

        app_config, _ = load_config(path)

        assert app_config.validation.strict_mode is expected
