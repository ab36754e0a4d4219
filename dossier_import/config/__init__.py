"""Configuration management for the dossier import pipeline."""

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    ImportConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NormalizationConfig,
    PersistenceConfig,
    PipelineConfig,
    SqliteJournalMode,
    ValidationConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_environment_config",
    # Configuration models
    "ImportConfig",
    "LoggingConfig",
    "ValidationConfig",
    "NormalizationConfig",
    "PipelineConfig",
    "PersistenceConfig",
    "EnvironmentConfig",
    "DEFAULT_DATABASE_URL",
    # Enums
    "LogLevel",
    "LogFormat",
    "SqliteJournalMode",
    # Exceptions
    "ConfigurationError",
]
