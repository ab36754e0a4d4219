"""Source normalization: links, kinds, reliability and access dates."""

import re
from typing import Any, Dict, List, Mapping, Tuple

from dossier_import.domain.vocabulary import (
    DEFAULT_RELIABILITY,
    LEGACY_SOURCE_KINDS,
    SOURCE_FIELD_ALIASES,
    SOURCE_KINDS,
    reliability_from_word,
)

from .fields import coerce_text, compact_number, parse_number, rename_legacy_fields

MARKDOWN_LINK = re.compile(r"\[.*?\]\((https?://[^)]+)\)")


def _normalize_reliability(record: Dict[str, Any], label: str, corrections: List[str]) -> None:
    raw = record.get("reliability")

    if raw is None:
        record["reliability"] = DEFAULT_RELIABILITY
        corrections.append(f"{label}: reliability missing, set to {DEFAULT_RELIABILITY}")
        return

    number = None
    if isinstance(raw, str):
        mapped = reliability_from_word(raw)
        if mapped is not None:
            record["reliability"] = mapped
            corrections.append(f"{label}: reliability '{raw}' converted to {mapped}")
            return
        number = parse_number(raw)
        if number is not None:
            corrections.append(f"{label}: reliability '{raw}' parsed as a number")
    else:
        number = parse_number(raw)

    if number is None:
        record["reliability"] = DEFAULT_RELIABILITY
        corrections.append(
            f"{label}: reliability {raw!r} not recognized, set to {DEFAULT_RELIABILITY}"
        )
        return

    clamped = min(100.0, max(0.0, number))
    if clamped != number:
        corrections.append(f"{label}: reliability {compact_number(number)} clamped to {compact_number(clamped)}")
    record["reliability"] = compact_number(clamped)


def normalize_source(
    source: Mapping[str, Any], position: int, today: str
) -> Tuple[Dict[str, Any], List[str]]:
    """Normalize one source record.

    Args:
        source: Parsed source object
        position: 1-based position of the source, used in corrections
        today: Date (YYYY-MM-DD) used when the access date is missing

    Returns:
        (normalized record, corrections)
    """
    label = f"Source {position}"
    record, corrections = rename_legacy_fields(source, SOURCE_FIELD_ALIASES, label)

    for field_name in ("title", "url", "kind", "author", "publishedDate", "accessedDate"):
        coerce_text(record, field_name, label, corrections)

    url = record.get("url")
    if isinstance(url, str):
        match = MARKDOWN_LINK.search(url)
        if match:
            record["url"] = match.group(1)
            corrections.append(f"{label}: Markdown link converted to bare URL")

    kind = record.get("kind")
    if not kind:
        record["kind"] = "web" if record.get("url") else "documentation"
        corrections.append(f"{label}: kind missing, set to '{record['kind']}'")
    elif isinstance(kind, str):
        lowered = kind.strip().lower()
        if lowered in LEGACY_SOURCE_KINDS:
            record["kind"] = LEGACY_SOURCE_KINDS[lowered]
            corrections.append(f"{label}: kind '{kind}' mapped to '{record['kind']}'")
        elif lowered != kind and lowered in SOURCE_KINDS:
            record["kind"] = lowered
            corrections.append(f"{label}: kind '{kind}' normalized to '{lowered}'")

    _normalize_reliability(record, label, corrections)

    if not record.get("accessedDate"):
        record["accessedDate"] = today
        corrections.append(f"{label}: access date missing, set to {today}")

    return record, corrections


def normalize_sources(value: Any, today: str) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Normalize the document-level source list.

    A single source object is wrapped into a list; entries that are not
    objects are dropped.
    """
    corrections: List[str] = []

    if value is None:
        return [], corrections

    if isinstance(value, dict):
        value = [value]
        corrections.append("Sources given as a single object wrapped into a list")
    elif not isinstance(value, list):
        corrections.append(f"Sources ignored: expected a list, got {type(value).__name__}")
        return [], corrections

    normalized: List[Dict[str, Any]] = []
    for position, source in enumerate(value, 1):
        if not isinstance(source, dict):
            corrections.append(f"Source {position}: not an object, dropped")
            continue
        record, source_corrections = normalize_source(source, position, today)
        normalized.append(record)
        corrections.extend(source_corrections)

    return normalized, corrections
