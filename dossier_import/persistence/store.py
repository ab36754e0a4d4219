"""SQL-backed persistence collaborator for the import pipeline."""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from dossier_import.domain.models import ImportDocument
from dossier_import.domain.records import ImportRun, StoredFable
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS
from dossier_import.logging import get_logger
from dossier_import.pipeline.models import DocumentPersister, ImportRunLog
from dossier_import.utils.timestamps import utc_now
from dossier_import.validation.models import ValidationResult
from dossier_import.validation.scoring import completeness_score

from .database import get_session
from .exceptions import PersistenceError
from .repositories import FableRepository, ImportRunRepository, TerritoryContextRepository

logger = get_logger(__name__, component="persistence")


class SqlDossierStore(DocumentPersister, ImportRunLog):
    """Stores committed documents and records import attempts.

    persist() upserts the territory context of the target pair and appends
    the document's fables as drafts in one transaction. Storage failures are
    logged and reported as False, never raised.
    """

    def __init__(
        self,
        record_runs: bool = True,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.record_runs = record_runs
        self.clock = clock
        self.logger = logger_instance or logger

    def persist(self, document: ImportDocument, exploration_id: str, marche_id: str) -> bool:
        payload = document.to_payload()
        now = self.clock()

        skipped = [key for key in payload["dimensions"] if key not in CANONICAL_DOMAINS]
        if skipped:
            self.logger.warning(
                "Non-canonical dimensions not stored",
                extra={"event": "persistence.dimensions.skipped", "skipped_keys": skipped},
            )

        dimensions = {key: value for key, value in payload["dimensions"].items() if key in CANONICAL_DOMAINS}
        fables = [
            StoredFable(
                exploration_id=exploration_id,
                marche_id=marche_id,
                title=fable.get("title"),
                main_content=fable.get("mainContent"),
                order=fable.get("order"),
                dimension_ref=fable.get("dimensionRef"),
                tags=fable.get("tags") or [],
                variations=fable.get("variations"),
                inspiration_sources=fable.get("inspirationSources"),
                status="draft",
                created_at=now,
            )
            for fable in payload["fables"]
        ]

        try:
            with get_session() as session:
                TerritoryContextRepository(session).upsert(
                    exploration_id=exploration_id,
                    marche_id=marche_id,
                    dimensions=dimensions,
                    sources=payload["sources"],
                    metadata=payload["metadata"],
                    completeness_score=completeness_score(document),
                    timestamp=now,
                )
                stored = FableRepository(session).add_many(fables)
        except (PersistenceError, SQLAlchemyError) as e:
            self.logger.error(
                f"Failed to persist document: {e}",
                extra={"event": "persistence.context.failed", "error_type": type(e).__name__},
            )
            return False

        self.logger.info(
            "Territory context upserted",
            extra={
                "event": "persistence.context.upserted",
                "dimensions": len(dimensions),
                "fables": len(stored),
            },
        )
        return True

    def record_run(
        self,
        mode: str,
        status: str,
        exploration_id: Optional[str] = None,
        marche_id: Optional[str] = None,
        validation: Optional[ValidationResult] = None,
        corrections_count: int = 0,
        error_message: Optional[str] = None,
    ) -> None:
        if not self.record_runs:
            return

        run = ImportRun(
            mode=mode,
            status=status,
            exploration_id=exploration_id,
            marche_id=marche_id,
            valid=validation.valid if validation is not None else None,
            completeness_score=validation.completeness_score if validation is not None else None,
            quality_score=validation.quality_score if validation is not None else None,
            error_count=len(validation.errors) if validation is not None else 0,
            warning_count=len(validation.warnings) if validation is not None else 0,
            corrections_count=corrections_count,
            validation=validation.to_dict() if validation is not None else None,
            error_message=error_message,
            created_at=self.clock(),
        )

        try:
            with get_session() as session:
                ImportRunRepository(session).add(run)
        except (PersistenceError, SQLAlchemyError) as e:
            self.logger.error(
                f"Failed to record import run: {e}",
                extra={"event": "persistence.run.failed", "error_type": type(e).__name__},
            )
            return

        self.logger.debug(
            "Import run recorded",
            extra={"event": "persistence.run.recorded", "mode": mode, "status": status},
        )
