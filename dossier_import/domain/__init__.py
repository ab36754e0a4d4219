"""Domain models and canonical vocabulary for territory dossiers."""

from .models import DimensionData, FableData, ImportDocument, SourceData
from .vocabulary import (
    CANONICAL_DOMAINS,
    DIMENSION_ALIASES,
    DIMENSION_CONTAINER,
    LEGACY_DIMENSION_CONTAINER,
    SOURCE_KINDS,
    CanonicalTarget,
    SplitTarget,
)

__all__ = [
    "ImportDocument",
    "DimensionData",
    "SourceData",
    "FableData",
    "CANONICAL_DOMAINS",
    "DIMENSION_ALIASES",
    "DIMENSION_CONTAINER",
    "LEGACY_DIMENSION_CONTAINER",
    "SOURCE_KINDS",
    "CanonicalTarget",
    "SplitTarget",
]
