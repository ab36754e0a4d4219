"""Context propagation for structured logging.

Fields pushed here (import_id, exploration_id, marche_id, mode) are copied
onto every log record emitted while they are active, so a single import
attempt can be followed across sanitizer, normalizer, validator and store.
Context lives in a ContextVar, so concurrent imports never see each other's
fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


ImportLogContext: ContextVar[Dict[str, Any]] = ContextVar("import_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return ImportLogContext.get().copy()


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the active logging context.

    ``None`` values are skipped so optional identifiers do not show up as
    ``null`` on every record.

    Args:
        **fields: Key-value pairs to add to the logging context

    Returns:
        Token restoring the previous context when passed to pop_log_context()

    Example:
        >>> token = push_log_context(import_id="3f2a", marche_id="m-12")
        >>> pop_log_context(token)
    """
    current = ImportLogContext.get()
    added = {key: value for key, value in fields.items() if value is not None}
    return ImportLogContext.set({**current, **added})


def pop_log_context(token: Token) -> None:
    """Restore the logging context captured by push_log_context()."""
    ImportLogContext.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    ImportLogContext.set({})


class log_context:
    """Context manager scoping logging fields to a block.

    Example:
        >>> with log_context(import_id="3f2a", mode="preview"):
        ...     logger.info("Previewing import")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
