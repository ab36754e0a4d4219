"""Field-level helpers shared by the record normalizers."""

import json
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple


def rename_legacy_fields(
    record: Mapping[str, Any],
    aliases: Mapping[str, str],
    label: str,
) -> Tuple[Dict[str, Any], List[str]]:
    """Rename legacy field names to their canonical spelling.

    When both spellings are present the canonical value is kept and the
    legacy one dropped. Key order is preserved.

    Returns:
        (renamed record, corrections)
    """
    renamed: Dict[str, Any] = {}
    corrections: List[str] = []

    for key, value in record.items():
        canonical = aliases.get(key)
        if canonical is None:
            if key not in renamed:
                renamed[key] = value
            continue

        if canonical in record:
            corrections.append(
                f"{label}: legacy field '{key}' dropped, '{canonical}' already present"
            )
            continue

        renamed[canonical] = value
        corrections.append(f"{label}: field '{key}' renamed to '{canonical}'")

    return renamed, corrections


def coerce_text(
    record: Dict[str, Any], field_name: str, label: str, corrections: List[str]
) -> None:
    """Convert a present, non-string value to text in place."""
    value = record.get(field_name)
    if value is None or isinstance(value, str):
        return
    if isinstance(value, (dict, list)):
        record[field_name] = json.dumps(value, ensure_ascii=False)
    elif isinstance(value, bool):
        record[field_name] = str(value).lower()
    else:
        record[field_name] = str(value)
    corrections.append(f"{label}: '{field_name}' converted to text")


def parse_number(value: Any) -> Optional[float]:
    """Interpret value as a finite number, or None.

    Booleans are not numbers here. Strings may carry surrounding spaces, a
    trailing percent sign and a decimal comma.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().rstrip("%").strip().replace(",", ".")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def compact_number(number: float):
    """Return an int when the float has no fractional part."""
    return int(number) if float(number).is_integer() else number
