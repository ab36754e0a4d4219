"""Data models for pipeline results."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dossier_import.domain.models import ImportDocument
from dossier_import.validation.models import PostImportCheck, ValidationResult


class DocumentPersister(ABC):
    """Persistence collaborator receiving validated documents.

    Its contract is "accept document + identifiers, return success"; it runs
    no further validation.
    """

    @abstractmethod
    def persist(self, document: ImportDocument, exploration_id: str, marche_id: str) -> bool:
        """Store the document for the given target. Returns True on success."""


class ImportRunLog(ABC):
    """Records every preview/commit attempt."""

    @abstractmethod
    def record_run(
        self,
        mode: str,
        status: str,
        exploration_id: Optional[str] = None,
        marche_id: Optional[str] = None,
        validation: Optional[ValidationResult] = None,
        corrections_count: int = 0,
        error_message: Optional[str] = None,
    ) -> None:
        """Record one attempt. Must not raise on storage failure."""


@dataclass(frozen=True)
class PreviewResult:
    """
    Outcome of a preview: the normalized document and every diagnostic.

    Attributes:
        document: Canonical document produced by the normalizer
        corrections: Sanitizer and normalizer rewrites, in order
        warnings: Normalizer anomaly warnings
        validation: Validator result (its own errors, warnings and scores)
    """

    document: ImportDocument
    corrections: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=lambda: ValidationResult(valid=False))

    @property
    def valid(self) -> bool:
        return self.validation.valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "normalizedDocument": self.document.to_payload(),
            "corrections": list(self.corrections),
            "warnings": list(self.warnings),
            "validation": self.validation.to_dict(),
        }


@dataclass(frozen=True)
class CommitResult:
    """
    Outcome of a commit attempt.

    Attributes:
        status: 'committed', 'refused' (validation failed or identifiers
            missing) or 'failed' (persistence collaborator reported failure)
        preview: Diagnostics gathered before the commit decision
        exploration_id: Target exploration
        marche_id: Target marche
        message: Human-readable reason for a refusal or failure
        post_import: Post-commit check, only set once committed
    """

    status: str
    preview: PreviewResult
    exploration_id: Optional[str] = None
    marche_id: Optional[str] = None
    message: Optional[str] = None
    post_import: Optional[PostImportCheck] = None

    @property
    def committed(self) -> bool:
        return self.status == "committed"

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "status": self.status,
            "committed": self.committed,
            "explorationId": self.exploration_id,
            "marcheId": self.marche_id,
            "message": self.message,
            "corrections": list(self.preview.corrections),
            "warnings": list(self.preview.warnings),
            "validation": self.preview.validation.to_dict(),
        }
        if self.post_import is not None:
            payload["postImport"] = {
                "success": self.post_import.success,
                "issues": list(self.post_import.issues),
            }
        return payload
