"""Validation and scoring of normalized documents."""

from .levels import validate_context, validate_semantics, validate_syntax
from .models import LevelResult, PostImportCheck, ValidationContext, ValidationResult
from .scoring import completeness_score, quality_score
from .service import DossierValidator, validate_document, validate_post_import

__all__ = [
    "DossierValidator",
    "validate_document",
    "validate_post_import",
    "validate_syntax",
    "validate_semantics",
    "validate_context",
    "completeness_score",
    "quality_score",
    "ValidationContext",
    "ValidationResult",
    "LevelResult",
    "PostImportCheck",
]
