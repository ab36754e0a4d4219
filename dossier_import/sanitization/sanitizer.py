"""Best-effort repair of near-valid structured text.

The sanitizer never raises on malformed input. It runs the literal-token
scan followed by eight corrective passes in a fixed order; each pass is a
no-op on clean text, so sanitizing twice gives the same result as once.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from dossier_import.logging import get_logger

from . import passes

logger = get_logger(__name__, component="sanitization")

SanitizationPass = Tuple[str, str, Callable[[str], str]]

# (name, correction message, function), in application order
SANITIZATION_PASSES: Tuple[SanitizationPass, ...] = (
    ("literal_tokens", "Python literals None/True/False rewritten outside strings", passes.rewrite_literal_tokens),
    ("comment_lines", "Comment lines starting with '#' removed", passes.strip_comment_lines),
    ("parenthesized_scalars", "Parentheses around quoted values removed", passes.unwrap_parenthesized_scalars),
    ("single_quotes", "Single-quoted strings converted to double quotes", passes.convert_single_quoted),
    ("split_literals", "Strings split across lines merged", passes.merge_split_literals),
    ("smart_quotes", "Typographic quotes normalized", passes.normalize_smart_quotes),
    ("trailing_separators", "Trailing commas before closing brackets removed", passes.remove_trailing_separators),
    ("escape_sequences", "Invalid escape sequences removed", passes.clean_escape_sequences),
    ("blank_lines", "Consecutive blank lines collapsed", passes.collapse_blank_lines),
)


@dataclass(frozen=True)
class SanitizationReport:
    """Sanitized text plus one correction per pass that changed it."""

    text: str
    corrections: List[str] = field(default_factory=list)
    applied_passes: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied_passes)


def sanitize_with_report(text: str) -> SanitizationReport:
    """Sanitize text and record which passes rewrote it.

    Args:
        text: Raw, possibly malformed structured text

    Returns:
        SanitizationReport with the repaired text and its audit trail
    """
    if not text:
        return SanitizationReport(text="")

    corrections: List[str] = []
    applied: List[str] = []
    current = text

    for name, message, apply_pass in SANITIZATION_PASSES:
        result = apply_pass(current)
        if result != current:
            applied.append(name)
            corrections.append(message)
            logger.debug(
                "Sanitization pass rewrote text",
                extra={"event": "sanitization.pass.applied", "pass_name": name},
            )
        current = result

    logger.info(
        "Text sanitized",
        extra={
            "event": "sanitization.completed",
            "input_length": len(text),
            "output_length": len(current),
            "passes_applied": len(applied),
        },
    )

    return SanitizationReport(text=current, corrections=corrections, applied_passes=applied)


def sanitize(text: str) -> str:
    """Return the repaired text only. See sanitize_with_report()."""
    return sanitize_with_report(text).text
