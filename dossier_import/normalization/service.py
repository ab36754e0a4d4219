"""Dossier normalization service.

Reshapes a parsed but loosely-structured value into the canonical
ImportDocument:

1. Locate the domain container ('dimensions', or legacy 'donnees')
2. Resolve, split and reshape every dimension
3. Hoist fables misplaced inside the container
4. Normalize fables and sources
5. Enrich metadata with dates and sentinel defaults
6. Detect anomalies (warnings only)

The only hard failure is a value without any domain container.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from dossier_import.domain.models import ImportDocument
from dossier_import.domain.vocabulary import (
    CANONICAL_DOMAINS,
    DIMENSION_CONTAINER,
    LEGACY_DIMENSION_CONTAINER,
    LOW_RELIABILITY_THRESHOLD,
)
from dossier_import.exceptions import DossierStructureError
from dossier_import.logging import get_logger
from dossier_import.utils.timestamps import ensure_utc, today_iso, utc_now

from .dimensions import normalize_dimensions
from .fables import normalize_fables
from .metadata import DEFAULT_AI_MODEL, DEFAULT_VALIDATION_LEVEL, enrich_metadata
from .models import NormalizationResult
from .sources import normalize_sources

logger = get_logger(__name__, component="normalization")

MIN_EXPECTED_DOMAINS = 3
MIN_EXPECTED_SOURCES = 2


class DossierNormalizer:
    """Normalizes parsed dossiers into canonical ImportDocument instances.

    Responsibilities:
    - Find the domain container and fail only when it is missing
    - Map legacy and misspelled dimension names onto canonical domains
    - Repair sources, fables and metadata, logging every rewrite
    - Report anomalies as warnings
    """

    def __init__(
        self,
        now: Optional[datetime] = None,
        default_ai_model: str = DEFAULT_AI_MODEL,
        default_validation_level: str = DEFAULT_VALIDATION_LEVEL,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize DossierNormalizer.

        Args:
            now: Reference time for generated dates (UTC). Defaults to utc_now()
                at each normalize() call
            default_ai_model: Value used when metadata.aiModel is missing
            default_validation_level: Value used when metadata.validationLevel is missing
            logger_instance: Logger instance (defaults to module logger)
        """
        self.now = ensure_utc(now) if now else None
        self.default_ai_model = default_ai_model
        self.default_validation_level = default_validation_level
        self.logger = logger_instance or logger

    def normalize(self, raw: Any) -> NormalizationResult:
        """Normalize one parsed value.

        Args:
            raw: Parsed structured text (normally a dict)

        Returns:
            NormalizationResult with the canonical document, corrections and warnings

        Raises:
            DossierStructureError: If raw is not a mapping or has no domain container
        """
        if not isinstance(raw, dict):
            raise DossierStructureError(
                f"Expected an object at the top level, got {type(raw).__name__}",
                suggestions=["Wrap the dossier in a single object with a 'dimensions' key"],
            )

        now = self.now or utc_now()
        today = today_iso(now)
        corrections: List[str] = []

        container = self._find_container(raw, corrections)
        dimension_result = normalize_dimensions(container)
        corrections.extend(dimension_result.corrections)

        fable_input = raw.get("fables")
        if dimension_result.hoisted_fables:
            existing = fable_input if isinstance(fable_input, list) else ([] if fable_input is None else [fable_input])
            fable_input = existing + dimension_result.hoisted_fables
        fables, fable_corrections = normalize_fables(fable_input)
        corrections.extend(fable_corrections)

        sources, source_corrections = normalize_sources(raw.get("sources"), today)
        corrections.extend(source_corrections)

        metadata, metadata_corrections = enrich_metadata(
            raw.get("metadata"),
            now,
            default_ai_model=self.default_ai_model,
            default_validation_level=self.default_validation_level,
        )
        corrections.extend(metadata_corrections)

        extras = {
            key: value
            for key, value in raw.items()
            if key not in (DIMENSION_CONTAINER, LEGACY_DIMENSION_CONTAINER, "fables", "sources", "metadata")
        }

        document = ImportDocument.model_validate({
            **extras,
            "dimensions": dimension_result.dimensions,
            "fables": fables,
            "sources": sources,
            "metadata": metadata,
        })
        warnings = detect_anomalies(document)

        for correction in corrections:
            self.logger.debug(
                correction, extra={"event": "normalization.correction.applied"}
            )

        self.logger.info(
            "Document normalized",
            extra={
                "event": "normalization.document.normalized",
                "dimensions": len(document.dimensions),
                "sources": len(document.sources),
                "fables": len(document.fables),
                "corrections": len(corrections),
                "warnings": len(warnings),
            },
        )

        return NormalizationResult(document=document, corrections=corrections, warnings=warnings)

    def _find_container(self, raw: Dict[str, Any], corrections: List[str]) -> Dict[str, Any]:
        container = raw.get(DIMENSION_CONTAINER)
        legacy = raw.get(LEGACY_DIMENSION_CONTAINER)

        if container is None and legacy is None:
            raise DossierStructureError(
                "No domain container found",
                errors=[
                    f"Missing '{DIMENSION_CONTAINER}' object",
                    f"Missing legacy '{LEGACY_DIMENSION_CONTAINER}' object",
                ],
                suggestions=[f"Put the domain data under a top-level '{DIMENSION_CONTAINER}' object"],
            )

        if container is None:
            container = legacy
            legacy = None
            corrections.append(
                f"Legacy container '{LEGACY_DIMENSION_CONTAINER}' renamed to '{DIMENSION_CONTAINER}'"
            )

        if not isinstance(container, dict):
            raise DossierStructureError(
                f"Domain container must be an object, got {type(container).__name__}",
                suggestions=[f"Use an object mapping domain names to their data under '{DIMENSION_CONTAINER}'"],
            )

        if isinstance(legacy, dict) and legacy:
            added = {k: v for k, v in legacy.items() if k not in container}
            container = {**container, **added}
            corrections.append(
                f"Legacy container '{LEGACY_DIMENSION_CONTAINER}' merged into '{DIMENSION_CONTAINER}' "
                f"({len(added)} entries added)"
            )

        return container


def detect_anomalies(document: ImportDocument) -> List[str]:
    """Return anomaly warnings for a normalized document."""
    warnings: List[str] = []

    present = [key for key in CANONICAL_DOMAINS if key in document.dimensions]
    if len(present) < MIN_EXPECTED_DOMAINS:
        warnings.append(
            f"Only {len(present)} canonical domain(s) present (at least {MIN_EXPECTED_DOMAINS} expected)"
        )

    if len(document.sources) < MIN_EXPECTED_SOURCES:
        warnings.append(
            f"Only {len(document.sources)} source(s) provided (at least {MIN_EXPECTED_SOURCES} recommended)"
        )

    if not document.fables:
        warnings.append("No fables provided")

    low = [
        source for source in document.sources
        if isinstance(source.reliability, (int, float)) and source.reliability < LOW_RELIABILITY_THRESHOLD
    ]
    if low:
        warnings.append(
            f"{len(low)} source(s) with reliability below {LOW_RELIABILITY_THRESHOLD}"
        )

    return warnings


def normalize(raw: Any, now: Optional[datetime] = None) -> NormalizationResult:
    """Normalize a parsed value with default settings. See DossierNormalizer."""
    return DossierNormalizer(now=now).normalize(raw)
