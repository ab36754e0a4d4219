"""Completeness and quality scores."""

import math

from dossier_import.domain.models import ImportDocument
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def completeness_score(document: ImportDocument) -> int:
    """Breadth and depth of canonical domain coverage, 0-100.

    Each canonical domain with non-empty data earns 50 plus 10 per top-level
    data key (at most 100); the sum is averaged over all eight domains.
    """
    total = 0
    for key in CANONICAL_DOMAINS:
        dimension = document.dimensions.get(key)
        if dimension is None or not dimension.data:
            continue
        total += 50 + min(50, 10 * len(dimension.data))
    return round_half_up(total / len(CANONICAL_DOMAINS))


def quality_score(document: ImportDocument, error_count: int, warning_count: int) -> int:
    """Composite confidence, 0-100.

    100, minus 15 per error and 5 per warning, plus up to 20 for canonical
    domain coverage, up to 10 for average source reliability and up to 10
    for fables.
    """
    score = 100 - 15 * error_count - 5 * warning_count
    score += min(20, 3 * len(document.canonical_dimension_keys))

    if document.sources:
        # Non-numeric reliabilities count as zero
        reliabilities = [s.reliability if isinstance(s.reliability, (int, float)) else 0 for s in document.sources]
        average = sum(reliabilities) / len(reliabilities)
        score += int(_clamp(round_half_up(average / 10), 0, 10))

    score += min(10, 2 * len(document.fables))
    return int(_clamp(score, 0, 100))
