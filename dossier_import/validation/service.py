"""Validation orchestrator.

Composes the three independent validation levels and the two scoring
functions. Never raises: even a document that cannot be built into the
canonical model yields a complete, renderable ValidationResult.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from dossier_import.domain.models import ImportDocument
from dossier_import.logging import get_logger

from .levels import validate_context, validate_semantics, validate_syntax
from .models import PostImportCheck, ValidationContext, ValidationResult
from .scoring import completeness_score, quality_score

logger = get_logger(__name__, component="validation")


class DossierValidator:
    """Decides commit eligibility and scores normalized documents."""

    def __init__(self, strict_mode: bool = False, logger_instance: Optional[logging.Logger] = None):
        self.strict_mode = strict_mode
        self.logger = logger_instance or logger

    def validate(
        self,
        document: Union[ImportDocument, Mapping[str, Any]],
        context: Optional[ValidationContext] = None,
    ) -> ValidationResult:
        """Run every validation level and compute both scores.

        Args:
            document: Normalized document, or a mapping in its wire shape
            context: Target identifiers and strict flag. When omitted, no
                contextual checks run

        Returns:
            ValidationResult; ``valid`` is true iff no level reported an error
        """
        if not isinstance(document, ImportDocument):
            try:
                document = ImportDocument.model_validate(document)
            except ValidationError as e:
                return self._unbuildable(e)

        context = context or ValidationContext(strict_mode=self.strict_mode)

        errors = []
        warnings = []
        for level in (
            validate_syntax(document),
            validate_semantics(document),
            validate_context(document, context),
        ):
            errors.extend(level.errors)
            warnings.extend(level.warnings)

        result = ValidationResult(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            completeness_score=completeness_score(document),
            quality_score=quality_score(document, len(errors), len(warnings)),
        )

        self.logger.info(
            "Validation completed",
            extra={
                "event": "validation.completed",
                "valid": result.valid,
                "errors": len(errors),
                "warnings": len(warnings),
                "completeness_score": result.completeness_score,
                "quality_score": result.quality_score,
            },
        )
        return result

    def _unbuildable(self, error: ValidationError) -> ValidationResult:
        errors = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"])
            errors.append(f"{location}: {item['msg']}")

        self.logger.warning(
            "Document does not match the canonical shape",
            extra={"event": "validation.document.unbuildable", "errors": len(errors)},
        )
        return ValidationResult(valid=False, errors=errors, completeness_score=0, quality_score=0)

    def validate_post_import(self, exploration_id: str, marche_id: str) -> PostImportCheck:
        """Integrity check after a commit.

        Placeholder for checks against the persisted records; always succeeds.
        """
        self.logger.debug(
            "Post-import check",
            extra={
                "event": "validation.post_import.checked",
                "exploration_id": exploration_id,
                "marche_id": marche_id,
            },
        )
        return PostImportCheck(success=True, issues=[])


def validate_document(
    document: Union[ImportDocument, Mapping[str, Any]],
    context: Optional[ValidationContext] = None,
) -> ValidationResult:
    """Validate with default settings. See DossierValidator.validate()."""
    return DossierValidator().validate(document, context)


def validate_post_import(exploration_id: str, marche_id: str) -> PostImportCheck:
    return DossierValidator().validate_post_import(exploration_id, marche_id)
