"""Data access layer (repositories) for persistence operations.

Repositories encapsulate database operations and return domain records
rather than ORM models.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_import.domain.records import ImportRun, StoredFable, TerritoryContext
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS
from dossier_import.logging import get_logger

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import FableModel, ImportRunModel, TerritoryContextModel, format_db_datetime

logger = get_logger(__name__)


class TerritoryContextRepository:
    """Repository for territory contexts, one per (exploration_id, marche_id)."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, exploration_id: str, marche_id: str) -> Optional[TerritoryContext]:
        """Retrieve the context of a pair, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(TerritoryContextModel, (exploration_id, marche_id))
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving context {exploration_id}/{marche_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve territory context: {e}") from e

    def require(self, exploration_id: str, marche_id: str) -> TerritoryContext:
        """Like get(), but raises RecordNotFoundError when missing."""
        context = self.get(exploration_id, marche_id)
        if context is None:
            raise RecordNotFoundError(
                f"Territory context {exploration_id}/{marche_id} not found"
            )
        return context

    def upsert(
        self,
        exploration_id: str,
        marche_id: str,
        dimensions: Dict[str, Dict[str, Any]],
        sources: List[Dict[str, Any]],
        metadata: Dict[str, Any],
        completeness_score: Optional[int],
        timestamp: datetime,
    ) -> TerritoryContext:
        """Insert or replace the context of a pair.

        Only canonical domain keys are written; a domain absent from
        ``dimensions`` keeps its stored value.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        stamp = format_db_datetime(timestamp)
        try:
            model = self.session.get(TerritoryContextModel, (exploration_id, marche_id))
            if model is None:
                model = TerritoryContextModel(
                    exploration_id=exploration_id,
                    marche_id=marche_id,
                    created_at=stamp,
                )
                self.session.add(model)

            for key in CANONICAL_DOMAINS:
                if key in dimensions:
                    setattr(model, key, dimensions[key])

            model.sources = sources
            model.import_metadata = metadata
            model.completeness_score = completeness_score
            model.last_validation = stamp
            model.updated_at = stamp

            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting context {exploration_id}/{marche_id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert territory context: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting context {exploration_id}/{marche_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert territory context: {e}") from e


class FableRepository:
    """Repository for stored fables."""

    def __init__(self, session: Session):
        self.session = session

    def add_many(self, fables: List[StoredFable]) -> List[StoredFable]:
        """Append fables and return them with their assigned ids.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            models = [FableModel.from_domain(fable) for fable in fables]
            self.session.add_all(models)
            self.session.flush()
            return [model.to_domain() for model in models]
        except IntegrityError as e:
            logger.error(f"Integrity error inserting fables: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert fables: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting fables: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert fables: {e}") from e

    def get_for_target(self, exploration_id: str, marche_id: str) -> List[StoredFable]:
        """All fables of a pair, oldest first."""
        try:
            stmt = (
                select(FableModel)
                .where(FableModel.exploration_id == exploration_id, FableModel.marche_id == marche_id)
                .order_by(FableModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving fables for {exploration_id}/{marche_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve fables: {e}") from e


class ImportRunRepository:
    """Repository for the import-run log."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, run: ImportRun) -> ImportRun:
        try:
            model = ImportRunModel.from_domain(run)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()
        except SQLAlchemyError as e:
            logger.error(f"Error recording import run: {e}", exc_info=True)
            raise PersistenceError(f"Failed to record import run: {e}") from e

    def get_recent(self, limit: int = 20) -> List[ImportRun]:
        """Most recent runs first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(ImportRunModel).order_by(ImportRunModel.id.desc()).limit(limit)
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving import runs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve import runs: {e}") from e
