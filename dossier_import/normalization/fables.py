"""Fable normalization."""

from typing import Any, Dict, List, Mapping, Tuple

from dossier_import.domain.vocabulary import FABLE_FIELD_ALIASES

from .fields import coerce_text, compact_number, parse_number, rename_legacy_fields


def normalize_fable(fable: Mapping[str, Any], position: int) -> Tuple[Dict[str, Any], List[str]]:
    label = f"Fable {position}"
    record, corrections = rename_legacy_fields(fable, FABLE_FIELD_ALIASES, label)

    for field_name in ("title", "mainContent", "dimensionRef"):
        coerce_text(record, field_name, label, corrections)

    order = record.get("order")
    if order is not None and (isinstance(order, bool) or not isinstance(order, (int, float))):
        number = parse_number(order)
        if number is None:
            del record["order"]
            corrections.append(f"{label}: non-numeric order {order!r} dropped")
        else:
            record["order"] = compact_number(number)
            corrections.append(f"{label}: order {order!r} parsed as a number")

    tags = record.get("tags")
    if isinstance(tags, (str, int, float)):
        record["tags"] = [str(tags)]
        corrections.append(f"{label}: single tag wrapped into a list")
    elif tags is not None and not isinstance(tags, list):
        del record["tags"]
        corrections.append(f"{label}: tags of type {type(tags).__name__} dropped")
    elif isinstance(tags, list) and not all(isinstance(tag, str) for tag in tags):
        record["tags"] = [tag if isinstance(tag, str) else str(tag) for tag in tags]
        corrections.append(f"{label}: tags converted to text")

    variations = record.get("variations")
    if variations is not None and not isinstance(variations, dict):
        record["variations"] = {"values": variations}
        corrections.append(f"{label}: non-object variations wrapped under 'values'")

    return record, corrections


def normalize_fables(value: Any) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Normalize the fable list, dropping entries that are not objects."""
    corrections: List[str] = []

    if value is None:
        return [], corrections
    if isinstance(value, dict):
        value = [value]
        corrections.append("Fables given as a single object wrapped into a list")
    elif not isinstance(value, list):
        corrections.append(f"Fables ignored: expected a list, got {type(value).__name__}")
        return [], corrections

    normalized: List[Dict[str, Any]] = []
    for position, fable in enumerate(value, 1):
        if not isinstance(fable, dict):
            corrections.append(f"Fable {position}: not an object, dropped")
            continue
        record, fable_corrections = normalize_fable(fable, position)
        normalized.append(record)
        corrections.extend(fable_corrections)

    return normalized, corrections
