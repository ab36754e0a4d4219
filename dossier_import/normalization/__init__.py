"""Normalization layer: reshapes parsed dossiers into the canonical schema.

This module provides:
- DossierNormalizer: service converting parsed values to ImportDocument
- NormalizationResult: document plus corrections and anomaly warnings
- normalize_source: per-source repair, usable on its own
"""

from .dimensions import fuzzy_match, positional_similarity
from .models import NormalizationResult
from .service import DossierNormalizer, detect_anomalies, normalize
from .sources import normalize_source

__all__ = [
    "DossierNormalizer",
    "NormalizationResult",
    "normalize",
    "normalize_source",
    "detect_anomalies",
    "fuzzy_match",
    "positional_similarity",
]
