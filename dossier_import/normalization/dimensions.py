"""Dimension-key resolution and structural reshaping.

Resolution of a key found under the domain container:

1. canonical keys pass through untouched
2. direct lookup in the legacy table (a single canonical target, or a split
   of a combined legacy domain into two canonical domains)
3. fuzzy match against the canonical set
4. otherwise the key is kept verbatim

Each resolved value is then reshaped into ``{description, data}``.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dossier_import.domain.vocabulary import (
    CANONICAL_DOMAINS,
    DIMENSION_ALIASES,
    DIMENSION_FIELD_ALIASES,
    CanonicalTarget,
    DimensionTarget,
    SplitTarget,
    dimension_template,
)

from .fields import coerce_text, rename_legacy_fields

FUZZY_PREFIX_LENGTH = 6
FUZZY_THRESHOLD = 0.7

_SEPARATORS = re.compile(r"[_\s-]")


def squash_key(key: str) -> str:
    """Lower-case a key and strip underscores, hyphens and whitespace."""
    return _SEPARATORS.sub("", key).lower()


def positional_similarity(a: str, b: str) -> float:
    """Share of identical characters at identical indices.

    Divides by the length of the longer string. Two empty strings are
    identical.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    matches = sum(1 for left, right in zip(a, b) if left == right)
    return matches / longest


def fuzzy_match(key: str) -> Optional[str]:
    """Find the first canonical domain resembling key, or None."""
    squashed = squash_key(key)
    if not squashed:
        return None

    for candidate in CANONICAL_DOMAINS:
        target = squash_key(candidate)
        if target[:FUZZY_PREFIX_LENGTH] in squashed or squashed[:FUZZY_PREFIX_LENGTH] in target:
            return candidate
        if positional_similarity(squashed, target) > FUZZY_THRESHOLD:
            return candidate
    return None


def lookup_alias(key: str) -> Optional[DimensionTarget]:
    return DIMENSION_ALIASES.get(key) or DIMENSION_ALIASES.get(key.lower())


@dataclass
class DimensionNormalization:
    """Outcome of normalizing the domain container."""

    dimensions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    corrections: List[str] = field(default_factory=list)
    hoisted_fables: List[Any] = field(default_factory=list)


def reshape_dimension(value: Mapping[str, Any], key: str) -> Tuple[Dict[str, Any], List[str]]:
    """Bring one dimension value into the ``{description, data}`` shape.

    - description and data present: unchanged
    - neither present: template description, the whole value becomes data
    - description only: the remaining keys become data
    - data only: template description, data merged over the domain defaults
      without overwriting provided values
    """
    label = f"Dimension '{key}'"
    record, corrections = rename_legacy_fields(value, DIMENSION_FIELD_ALIASES, label)
    coerce_text(record, "description", label, corrections)

    data = record.get("data")
    if data is not None and not isinstance(data, dict):
        record["data"] = {"values": data}
        corrections.append(f"{label}: non-object data wrapped under 'values'")

    has_description = record.get("description") is not None
    has_data = record.get("data") is not None
    template_description, template_data = dimension_template(key)

    if has_description and has_data:
        return record, corrections

    if not has_description and not has_data:
        rest = {k: v for k, v in record.items() if k not in ("description", "data")}
        corrections.append(f"{label}: description generated, content moved under 'data'")
        return {"description": template_description, "data": rest}, corrections

    if has_description:
        rest = {k: v for k, v in record.items() if k not in ("description", "data")}
        corrections.append(f"{label}: remaining fields moved under 'data'")
        return {"description": record["description"], "data": rest}, corrections

    reshaped = {k: v for k, v in record.items() if k != "description"}
    reshaped["description"] = template_description
    reshaped["data"] = {**template_data, **record["data"]}
    corrections.append(f"{label}: description generated, data completed with domain defaults")
    return reshaped, corrections


def split_dimension(
    value: Mapping[str, Any], key: str, target: SplitTarget
) -> Tuple[Dict[str, Dict[str, Any]], List[str]]:
    """Partition a combined legacy domain into its two canonical domains.

    Data keys listed in the split target go to the secondary domain, every
    other key to the primary one, so the original keys are partitioned
    exactly. A side left without any key receives its domain defaults.
    """
    label = f"Dimension '{key}'"
    record, corrections = rename_legacy_fields(value, DIMENSION_FIELD_ALIASES, label)
    coerce_text(record, "description", label, corrections)

    if isinstance(record.get("data"), dict):
        combined = record["data"]
    else:
        combined = {k: v for k, v in record.items() if k != "description"}

    primary_data = {k: v for k, v in combined.items() if k not in target.secondary_keys}
    secondary_data = {k: v for k, v in combined.items() if k in target.secondary_keys}

    primary_description = record.get("description") or dimension_template(target.primary)[0]
    secondary_description = dimension_template(target.secondary)[0]

    corrections.append(
        f"{label} split into '{target.primary}' and '{target.secondary}'"
    )

    for part_key, part_data in ((target.primary, primary_data), (target.secondary, secondary_data)):
        if not part_data:
            part_data.update(dimension_template(part_key)[1])
            corrections.append(f"Dimension '{part_key}': no data after split, filled with domain defaults")

    return {
        target.primary: {"description": primary_description, "data": primary_data},
        target.secondary: {"description": secondary_description, "data": secondary_data},
    }, corrections


def _merge_into(
    result: DimensionNormalization, key: str, dimension: Dict[str, Any], origin: str
) -> None:
    existing = result.dimensions.get(key)
    if existing is None:
        result.dimensions[key] = dimension
        return

    merged_data = {**dimension.get("data", {}), **existing.get("data", {})}
    result.dimensions[key] = {**dimension, **existing, "data": merged_data}
    result.corrections.append(
        f"Dimension '{origin}' merged into existing '{key}' without overwriting its values"
    )


def normalize_dimensions(container: Mapping[str, Any]) -> DimensionNormalization:
    """Resolve, split and reshape every entry of the domain container.

    Canonical keys are processed first so they take precedence over legacy
    or fuzzy-matched entries resolving to the same domain.
    """
    result = DimensionNormalization()

    ordered = [k for k in container if k in CANONICAL_DOMAINS]
    ordered += [k for k in container if k not in CANONICAL_DOMAINS]

    for key in ordered:
        value = container[key]

        if key == "fables" and isinstance(value, list):
            result.hoisted_fables.extend(value)
            result.corrections.append(
                f"{len(value)} fable(s) found inside the domain container moved to the document root"
            )
            continue

        if not isinstance(value, dict):
            result.corrections.append(
                f"Dimension '{key}' dropped: expected an object, got {type(value).__name__}"
            )
            continue

        if key in CANONICAL_DOMAINS:
            reshaped, corrections = reshape_dimension(value, key)
            result.corrections.extend(corrections)
            _merge_into(result, key, reshaped, key)
            continue

        target = lookup_alias(key)
        if isinstance(target, SplitTarget):
            parts, corrections = split_dimension(value, key, target)
            result.corrections.extend(corrections)
            for part_key, part in parts.items():
                _merge_into(result, part_key, part, key)
            continue

        if isinstance(target, CanonicalTarget):
            resolved = target.key
            result.corrections.append(f"Dimension '{key}' mapped to '{resolved}'")
        else:
            resolved = fuzzy_match(key)
            if resolved is not None:
                result.corrections.append(
                    f"Dimension '{key}' mapped to '{resolved}' (fuzzy match)"
                )
            else:
                resolved = key

        reshaped, corrections = reshape_dimension(value, resolved)
        result.corrections.extend(corrections)
        _merge_into(result, resolved, reshaped, key)

    return result
