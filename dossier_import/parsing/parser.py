"""Structured-text parsing with advisory error hints."""

import json
from typing import Any, Dict, Optional

from dossier_import.exceptions import DossierParseError, DossierStructureError
from dossier_import.logging import get_logger

logger = get_logger(__name__, component="parsing")

HINT_PARENTHESIS = "Check for unmatched parentheses around values"
HINT_COMMENT = "Remove comment markers (#) from the text"
HINT_SEPARATOR = "Check for stray commas before a closing bracket or between values"


def _hint_for(text: str, position: int) -> Optional[str]:
    """Guess the cause of a parse failure from the text around the error."""
    window = text[max(0, position - 1):position + 2]
    if "(" in window or ")" in window:
        return HINT_PARENTHESIS
    if "#" in window:
        return HINT_COMMENT

    before = text[:position].rstrip()
    at = text[position:position + 1]
    if at == "," or before.endswith(","):
        return HINT_SEPARATOR
    return None


def parse_text(text: str) -> Any:
    """Parse sanitized text into Python values.

    Raises:
        DossierParseError: If the text is not valid JSON. The error carries
            the parser's message, the failing position and, when one of the
            known malformations is recognised, an advisory hint.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        hint = _hint_for(text, e.pos)
        logger.warning(
            "Sanitized text failed to parse",
            extra={
                "event": "parsing.failed",
                "error": e.msg,
                "line": e.lineno,
                "column": e.colno,
                "hint": hint,
            },
        )
        raise DossierParseError(
            f"Invalid structured text: {e.msg} (line {e.lineno}, column {e.colno})",
            hint=hint,
            position=e.pos,
        ) from e


def parse_mapping(text: str) -> Dict[str, Any]:
    """Parse text and require a mapping at the top level.

    Raises:
        DossierParseError: If the text is not valid JSON
        DossierStructureError: If the top-level value is not an object
    """
    value = parse_text(text)
    if not isinstance(value, dict):
        raise DossierStructureError(
            f"Expected an object at the top level, got {type(value).__name__}",
            suggestions=["Wrap the dossier in a single object with a 'dimensions' key"],
        )
    return value
