"""Text sanitization: repairs near-valid structured text before parsing."""

from .sanitizer import SANITIZATION_PASSES, SanitizationReport, sanitize, sanitize_with_report

__all__ = [
    "sanitize",
    "sanitize_with_report",
    "SanitizationReport",
    "SANITIZATION_PASSES",
]
