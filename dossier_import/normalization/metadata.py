"""Metadata enrichment."""

from datetime import datetime
from typing import Any, Dict, List, Tuple

from dossier_import.domain.vocabulary import METADATA_FIELD_ALIASES
from dossier_import.utils.timestamps import format_timestamp, today_iso

from .fields import rename_legacy_fields

DEFAULT_AI_MODEL = "system-managed"
DEFAULT_VALIDATION_LEVEL = "automatique"


def enrich_metadata(
    value: Any,
    now: datetime,
    default_ai_model: str = DEFAULT_AI_MODEL,
    default_validation_level: str = DEFAULT_VALIDATION_LEVEL,
) -> Tuple[Dict[str, Any], List[str]]:
    """Fill sourcingDate, importDate, aiModel and validationLevel when absent."""
    corrections: List[str] = []

    if value is None:
        value = {}
    elif not isinstance(value, dict):
        corrections.append(f"Metadata ignored: expected an object, got {type(value).__name__}")
        value = {}

    metadata, rename_corrections = rename_legacy_fields(value, METADATA_FIELD_ALIASES, "Metadata")
    corrections.extend(rename_corrections)

    defaults = (
        ("sourcingDate", today_iso(now)),
        ("importDate", format_timestamp(now)),
        ("aiModel", default_ai_model),
        ("validationLevel", default_validation_level),
    )
    for field_name, default in defaults:
        if not metadata.get(field_name):
            metadata[field_name] = default
            corrections.append(f"Metadata: {field_name} missing, set to {default}")

    return metadata, corrections
