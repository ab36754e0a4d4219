"""Exceptions raised by the import pipeline.

Only two situations abort an import: text that still cannot be parsed after
sanitization, and a parsed value with no domain container. Everything else
is reported through corrections, warnings and validation errors.
"""

from typing import List, Optional, Sequence


def format_diagnostics(
    message: str,
    errors: Sequence[str] = (),
    suggestions: Sequence[str] = (),
    errors_heading: str = "Errors:",
) -> str:
    """Render a message with numbered errors and bulleted suggestions."""
    parts = [message]

    if errors:
        parts.append(f"\n{errors_heading}")
        parts.extend(f"  {i}. {error}" for i, error in enumerate(errors, 1))

    if suggestions:
        parts.append("\nSuggestions:")
        parts.extend(f"  - {suggestion}" for suggestion in suggestions)

    return "\n".join(parts)


class DossierImportError(Exception):
    """Base class for unrecoverable import failures.

    Renders the primary message, the itemized errors and the suggestions in
    one string so the CLI can print it as-is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(format_diagnostics(message, self.errors, self.suggestions))


class DossierParseError(DossierImportError):
    """Sanitized text still fails to parse.

    Attributes:
        hint: Advisory guess at the cause, or None
        position: Character offset reported by the parser, or None
    """

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        position: Optional[int] = None,
        errors: Optional[List[str]] = None,
    ):
        self.hint = hint
        self.position = position
        suggestions = [hint] if hint else []
        super().__init__(message, errors=errors, suggestions=suggestions)


class DossierStructureError(DossierImportError):
    """Parsed value has no domain container or is not a mapping."""
