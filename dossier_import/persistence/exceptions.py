"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch every database failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL
    - Database file not accessible
    - Database not initialized before use
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation requires a record that does not exist.

    Optional lookups return None instead of raising this.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated."""

    pass
