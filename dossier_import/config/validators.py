"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    pipeline = config_dict.get("pipeline", {})
    if isinstance(pipeline, dict):
        cache_size = pipeline.get("cache_size", 32)
        if isinstance(cache_size, int) and cache_size > 1024:
            warning_messages.append(
                f"Large pipeline.cache_size ({cache_size}) keeps many documents in memory"
            )

    persistence = config_dict.get("persistence", {})
    if isinstance(persistence, dict):
        if persistence.get("enabled") is False and persistence.get("record_runs") is True:
            warning_messages.append(
                "persistence.record_runs is ignored while persistence.enabled is false"
            )

    logging_section = config_dict.get("logging", {})
    if isinstance(logging_section, dict):
        level = logging_section.get("level")
        if isinstance(level, str) and level.strip().upper() == "DEBUG":
            warning_messages.append(
                "logging.level DEBUG logs every correction and may expose document content"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
