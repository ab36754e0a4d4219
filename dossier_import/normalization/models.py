"""Data models for the normalization layer."""

from dataclasses import dataclass, field
from typing import List

from dossier_import.domain.models import ImportDocument


@dataclass(frozen=True)
class NormalizationResult:
    """Result of normalizing one parsed dossier.

    Attributes:
        document: Canonical document, ready for validation
        corrections: Audit trail of every automatic rewrite, in order
        warnings: Anomalies that never block a commit
    """

    document: ImportDocument
    corrections: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def was_corrected(self) -> bool:
        return bool(self.corrections)
