"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class ValidationConfig(BaseModel):
    """Validator settings."""

    strict_mode: bool = Field(
        False,
        description="Require minimum domain, source and fable counts when identifiers are supplied",
    )


class NormalizationConfig(BaseModel):
    """Defaults filled in by the normalizer when metadata is missing."""

    default_ai_model: str = Field(
        "system-managed", min_length=1, description="Sentinel for metadata.aiModel"
    )
    default_validation_level: str = Field(
        "automatique", min_length=1, description="Sentinel for metadata.validationLevel"
    )

    @field_validator("default_ai_model", "default_validation_level")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from sentinel values."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


class PipelineConfig(BaseModel):
    """Pipeline runtime settings."""

    cache_size: int = Field(
        32, ge=0, le=4096, description="Memoized sanitize/parse/normalize results (0 = disabled)"
    )


class SqliteJournalMode(str, Enum):
    """SQLite journal modes the store can run with."""

    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    WAL = "WAL"


class PersistenceConfig(BaseModel):
    """Persistence collaborator settings."""

    enabled: bool = Field(True, description="Hand committed documents to the SQL store")
    record_runs: bool = Field(True, description="Record every preview/commit attempt")
    sqlite_timeout: float = Field(
        30.0, gt=0, le=300, description="Seconds a SQLite connection waits for a locked database"
    )
    sqlite_journal_mode: SqliteJournalMode = Field(
        SqliteJournalMode.DELETE, description="Journal mode applied to SQLite file databases"
    )
    echo_sql: bool = Field(False, description="Log every SQL statement emitted by the engine")

    model_config = {"use_enum_values": True}


class ImportConfig(BaseModel):
    """Root configuration object for the dossier import pipeline."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig, description="Validator settings"
    )
    normalization: NormalizationConfig = Field(
        default_factory=NormalizationConfig, description="Normalizer defaults"
    )
    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig, description="Pipeline runtime settings"
    )
    persistence: PersistenceConfig = Field(
        default_factory=PersistenceConfig, description="Persistence settings"
    )

    model_config = {"extra": "forbid"}
