"""Persisted record models returned by the repositories.

- TerritoryContext: the stored canonical dimensions of one (exploration, marche) pair
- StoredFable: a fable appended as a draft for a pair
- ImportRun: one recorded preview/commit attempt
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class TerritoryContext(BaseModel):
    """Canonical dimensions stored for one exploration/marche pair."""

    exploration_id: str = Field(..., min_length=1)
    marche_id: str = Field(..., min_length=1)
    dimensions: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    sources: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    completeness_score: Optional[int] = Field(None, ge=0, le=100)
    last_validation: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("last_validation", "created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return _as_utc(v)


class StoredFable(BaseModel):
    """A fable stored as a draft."""

    id: Optional[int] = None
    exploration_id: str
    marche_id: str
    title: Optional[str] = None
    main_content: Optional[str] = None
    order: Optional[float] = None
    dimension_ref: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    variations: Optional[Dict[str, Any]] = None
    inspiration_sources: Optional[Any] = None
    status: str = "draft"
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return _as_utc(v)


class ImportRun(BaseModel):
    """One recorded preview or commit attempt."""

    id: Optional[int] = None
    mode: str = Field(..., description="preview or commit")
    status: str = Field(..., description="valid, invalid, committed, refused or failed")
    exploration_id: Optional[str] = None
    marche_id: Optional[str] = None
    valid: Optional[bool] = None
    completeness_score: Optional[int] = None
    quality_score: Optional[int] = None
    error_count: int = 0
    warning_count: int = 0
    corrections_count: int = 0
    validation: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return _as_utc(v)
