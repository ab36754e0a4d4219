"""Data models for validation results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ValidationContext:
    """Target identifiers and mode for contextual validation.

    Contextual checks run only when at least one identifier is supplied.
    """

    exploration_id: Optional[str] = None
    marche_id: Optional[str] = None
    strict_mode: bool = False

    @property
    def has_identifiers(self) -> bool:
        return self.exploration_id is not None or self.marche_id is not None


@dataclass
class LevelResult:
    """Diagnostics produced by one validation level."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationResult:
    """Complete outcome of validating one document.

    ``valid`` is true iff there are no errors across all levels. Scores are
    integers in [0, 100].
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    completeness_score: int = 0
    quality_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "completenessScore": self.completeness_score,
            "qualityScore": self.quality_score,
        }


@dataclass(frozen=True)
class PostImportCheck:
    """Result of the post-commit integrity check."""

    success: bool
    issues: List[str] = field(default_factory=list)
