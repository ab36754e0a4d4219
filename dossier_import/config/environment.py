"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/dossier_import.db"

_VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        strict_mode: Optional[bool] = None,
        environment: Optional[str] = None,
    ):
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level.upper() if log_level else None
        self.strict_mode = strict_mode
        self.environment = environment or "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - DATABASE_URL: SQLAlchemy database URL (default: sqlite:///./data/dossier_import.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - IMPORT_STRICT_MODE: Override validation.strict_mode (true/false)
    - ENVIRONMENT: Environment label attached to every log record

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    database_url = os.getenv("DATABASE_URL")
    log_level = os.getenv("LOG_LEVEL")
    strict_mode_str = os.getenv("IMPORT_STRICT_MODE")
    environment = os.getenv("ENVIRONMENT")

    if log_level and log_level.upper() not in _VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(_VALID_LOG_LEVELS)}"
        )

    strict_mode = None
    if strict_mode_str:
        lowered = strict_mode_str.strip().lower()
        if lowered in _TRUE_VALUES:
            strict_mode = True
        elif lowered in _FALSE_VALUES:
            strict_mode = False
        else:
            errors.append(
                f"Invalid IMPORT_STRICT_MODE: '{strict_mode_str}'. Must be true or false."
            )

    if database_url is not None and not database_url.strip():
        errors.append("DATABASE_URL is set but empty")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; every variable is optional",
            ],
        )

    return EnvironmentConfig(
        database_url=database_url,
        log_level=log_level,
        strict_mode=strict_mode,
        environment=environment,
    )
