"""Persistence collaborator backed by SQLAlchemy.

Public API:
    # Database initialization and session management
    - init_database(database_url: str, settings: PersistenceConfig | None) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repositories
    - TerritoryContextRepository: territory contexts per (exploration_id, marche_id)
    - FableRepository: fables stored as drafts
    - ImportRunRepository: log of preview/commit attempts

    # Pipeline collaborator
    - SqlDossierStore: persist() and record_run() for ImportPipeline

Example usage:
    >>> from dossier_import.persistence import init_database, SqlDossierStore
    >>> init_database("sqlite:///./data/dossier_import.db")
    >>> store = SqlDossierStore()
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import FableRepository, ImportRunRepository, TerritoryContextRepository
from .store import SqlDossierStore

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "TerritoryContextRepository",
    "FableRepository",
    "ImportRunRepository",
    # Collaborator
    "SqlDossierStore",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
