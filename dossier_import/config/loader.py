"""Configuration loader for the dossier import pipeline."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import ImportConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_CANDIDATES = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[ImportConfig, EnvironmentConfig]:
    """
    Load and validate configuration from YAML file and environment variables.

    Config file lookup:
    1. Use provided config_path if given (it must exist)
    2. Try config.yaml in current directory
    3. Try ./config/config.yaml
    4. Fall back to built-in defaults

    Environment overrides (IMPORT_STRICT_MODE) are applied on top of the file.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (ImportConfig, EnvironmentConfig) with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or the explicit file is missing
    """
    config_file = _find_config_file(config_path)

    if config_file is None:
        app_config = ImportConfig()
    else:
        app_config = _load_config_file(config_file)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            suggestions=["Copy .env.example to .env and adjust the values"],
        )

    if env_config.strict_mode is not None:
        app_config = app_config.model_copy(
            update={
                "validation": app_config.validation.model_copy(
                    update={"strict_mode": env_config.strict_mode}
                )
            }
        )

    return app_config, env_config


def _load_config_file(config_file: Path) -> ImportConfig:
    """Read, warn about and validate one YAML configuration file."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
            source=config_file,
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[
                f"Ensure {config_file} is readable",
                "Check file permissions",
            ],
            source=config_file,
        )

    # An empty file means "all defaults"
    if config_dict is None:
        config_dict = {}

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level",
            suggestions=["Review config.example.yaml for correct format"],
            source=config_file,
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        return ImportConfig.model_validate(config_dict)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            error_type = error["type"]

            if error_type == "extra_forbidden":
                errors.append(f"Unknown configuration key: {field_path}")
            elif error_type in ["string_type", "int_type", "bool_type", "int_parsing", "bool_parsing"]:
                expected_type = error_type.split("_")[0]
                errors.append(
                    f"Invalid type for '{field_path}': expected {expected_type}, got {error.get('input')!r}"
                )
            elif "enum" in error_type:
                errors.append(f"Invalid value for '{field_path}': {error['msg']}")
            else:
                errors.append(f"{field_path}: {error['msg']}")

        raise ConfigurationError(
            "Configuration validation failed",
            errors=errors,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
            source=config_file,
        )


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file, or None when defaults should be used.

    Raises:
        ConfigurationError: If an explicit path was given and does not exist
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Omit --config to use config.yaml or built-in defaults",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_CANDIDATES:
        if candidate.exists():
            return candidate

    return None
