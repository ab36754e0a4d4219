"""Database schema definition and ORM models.

Territory contexts keep one JSON column per canonical domain, keyed by the
(exploration_id, marche_id) pair. Fables are appended as drafts; import
runs are an append-only log.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, Column, Float, Index, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from dossier_import.domain.records import ImportRun, StoredFable, TerritoryContext
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS
from dossier_import.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class TerritoryContextModel(Base):
    """ORM model for the territory_contexts table."""

    __tablename__ = "territory_contexts"

    exploration_id = Column(String(255), primary_key=True, nullable=False)
    marche_id = Column(String(255), primary_key=True, nullable=False)

    # One column per canonical domain, in canonical order
    contexte_hydrologique = Column(JSON, nullable=True)
    especes_caracteristiques = Column(JSON, nullable=True)
    vocabulaire_local = Column(JSON, nullable=True)
    empreintes_humaines = Column(JSON, nullable=True)
    projection_2035_2045 = Column(JSON, nullable=True)
    leviers_agroecologiques = Column(JSON, nullable=True)
    nouvelles_activites = Column(JSON, nullable=True)
    technodiversite = Column(JSON, nullable=True)

    sources = Column(JSON, nullable=False, default=list)
    import_metadata = Column("metadata", JSON, nullable=False, default=dict)
    completeness_score = Column(Integer, nullable=True)

    # Timestamps (stored as ISO 8601 strings)
    last_validation = Column(String(50), nullable=True)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    def to_domain(self) -> TerritoryContext:
        dimensions = {
            key: getattr(self, key) for key in CANONICAL_DOMAINS if getattr(self, key) is not None
        }
        return TerritoryContext(
            exploration_id=self.exploration_id,
            marche_id=self.marche_id,
            dimensions=dimensions,
            sources=self.sources or [],
            metadata=self.import_metadata or {},
            completeness_score=self.completeness_score,
            last_validation=parse_db_datetime(self.last_validation),
            created_at=parse_db_datetime(self.created_at),
            updated_at=parse_db_datetime(self.updated_at),
        )


class FableModel(Base):
    """ORM model for the fables table."""

    __tablename__ = "fables"

    id = Column(Integer, primary_key=True, autoincrement=True)
    exploration_id = Column(String(255), nullable=False)
    marche_id = Column(String(255), nullable=False)
    title = Column(Text, nullable=True)
    main_content = Column(Text, nullable=True)
    order = Column("position", Float, nullable=True)
    dimension_ref = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    variations = Column(JSON, nullable=True)
    inspiration_sources = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default="draft")
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_fables_target", "exploration_id", "marche_id"),
    )

    def to_domain(self) -> StoredFable:
        return StoredFable(
            id=self.id,
            exploration_id=self.exploration_id,
            marche_id=self.marche_id,
            title=self.title,
            main_content=self.main_content,
            order=self.order,
            dimension_ref=self.dimension_ref,
            tags=self.tags or [],
            variations=self.variations,
            inspiration_sources=self.inspiration_sources,
            status=self.status,
            created_at=parse_db_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, fable: StoredFable) -> "FableModel":
        return cls(
            exploration_id=fable.exploration_id,
            marche_id=fable.marche_id,
            title=fable.title,
            main_content=fable.main_content,
            order=fable.order,
            dimension_ref=fable.dimension_ref,
            tags=list(fable.tags),
            variations=fable.variations,
            inspiration_sources=fable.inspiration_sources,
            status=fable.status,
            created_at=format_db_datetime(fable.created_at),
        )


class ImportRunModel(Base):
    """ORM model for the import_runs table (append-only)."""

    __tablename__ = "import_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mode = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)
    exploration_id = Column(String(255), nullable=True)
    marche_id = Column(String(255), nullable=True)
    valid = Column(Boolean, nullable=True)
    completeness_score = Column(Integer, nullable=True)
    quality_score = Column(Integer, nullable=True)
    error_count = Column(Integer, nullable=False, default=0)
    warning_count = Column(Integer, nullable=False, default=0)
    corrections_count = Column(Integer, nullable=False, default=0)
    validation = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_import_runs_created", "created_at"),
    )

    def to_domain(self) -> ImportRun:
        return ImportRun(
            id=self.id,
            mode=self.mode,
            status=self.status,
            exploration_id=self.exploration_id,
            marche_id=self.marche_id,
            valid=self.valid,
            completeness_score=self.completeness_score,
            quality_score=self.quality_score,
            error_count=self.error_count,
            warning_count=self.warning_count,
            corrections_count=self.corrections_count,
            validation=self.validation,
            error_message=self.error_message,
            created_at=parse_db_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, run: ImportRun) -> "ImportRunModel":
        return cls(
            mode=run.mode,
            status=run.status,
            exploration_id=run.exploration_id,
            marche_id=run.marche_id,
            valid=run.valid,
            completeness_score=run.completeness_score,
            quality_score=run.quality_score,
            error_count=run.error_count,
            warning_count=run.warning_count,
            corrections_count=run.corrections_count,
            validation=run.validation,
            error_message=run.error_message,
            created_at=format_db_datetime(run.created_at),
        )


def format_db_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO 8601 UTC string with microseconds."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_db_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str:
        return None
    return datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        from sqlalchemy import inspect

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
