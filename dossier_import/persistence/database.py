"""Database engine and session lifecycle for the persistence collaborator.

The engine is configured from ``PersistenceConfig``: SQLite file databases
get their parent directory created, a lock timeout and a journal mode.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dossier_import.config.models import PersistenceConfig, SqliteJournalMode
from dossier_import.logging import get_logger

from .exceptions import DatabaseConnectionError

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str, settings: Optional[PersistenceConfig] = None) -> None:
    """Create the engine, check the connection and create missing tables.

    Call once at startup, before any get_session().

    Args:
        database_url: SQLAlchemy URL (e.g. "sqlite:///./data/dossier_import.db")
        settings: Engine settings (defaults to PersistenceConfig())

    Raises:
        DatabaseConnectionError: If initialization fails
    """
    global _engine, _session_factory

    settings = settings or PersistenceConfig()
    url = _parse_url(database_url)
    redacted = url.render_as_string(hide_password=True)

    logger.info(
        "Initializing database",
        extra={"event": "database.initializing", "database_url": redacted},
    )

    db_file = _sqlite_file(url)
    if db_file is not None and not db_file.parent.exists():
        logger.info(f"Creating database directory: {db_file.parent}")
        db_file.parent.mkdir(parents=True, exist_ok=True)

    is_sqlite = url.get_backend_name() == "sqlite"
    try:
        engine = create_engine(
            url,
            echo=settings.echo_sql,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False, "timeout": settings.sqlite_timeout} if is_sqlite else {},
        )
        if is_sqlite:
            journal_mode = SqliteJournalMode(settings.sqlite_journal_mode).value if db_file else None
            _configure_sqlite(engine, journal_mode)

        _check_connection(engine, is_sqlite)

        from .schema import create_schema

        create_schema(engine)
    except SQLAlchemyError as e:
        error_msg = f"Failed to initialize database {redacted}: {e}"
        logger.error(error_msg, exc_info=True)
        raise DatabaseConnectionError(error_msg) from e

    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)

    logger.info(
        "Database initialized",
        extra={"event": "database.initialized", "database_url": redacted},
    )


def _parse_url(database_url: str) -> URL:
    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")
    try:
        return make_url(database_url)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e


def _sqlite_file(url: URL) -> Optional[Path]:
    """Return the file behind a SQLite URL, or None for in-memory and other backends."""
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


def _configure_sqlite(engine: Engine, journal_mode: Optional[str]) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if journal_mode:
            cursor.execute(f"PRAGMA journal_mode={journal_mode}")
        cursor.close()


def _check_connection(engine: Engine, is_sqlite: bool) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).fetchone()
        if is_sqlite:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar()
            logger.debug(
                f"SQLite journal mode: {mode}",
                extra={"event": "database.sqlite.journal_mode", "journal_mode": mode},
            )


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Provide a session that commits on success and rolls back on error.

    Raises:
        DatabaseConnectionError: If the database is not initialized
        Exception: Any exception raised inside the block, after rollback

    Example:
        >>> with get_session() as session:
        ...     repo = TerritoryContextRepository(session)
        ...     context = repo.get("expl-1", "marche-7")
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back: {e}",
            extra={"event": "database.session.rolled_back", "error_type": type(e).__name__},
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Return the active engine.

    Raises:
        DatabaseConnectionError: If the database is not initialized
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )
    return _engine


def close_database() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database connections", extra={"event": "database.closing"})
        _engine.dispose()
        _engine = None
        _session_factory = None
