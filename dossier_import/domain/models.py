"""Canonical import document models.

These models describe the shape that leaves the normalizer and crosses the
trust boundary into persistence:

- ImportDocument: dimensions, fables, sources and metadata of one dossier
- DimensionData: description plus a free-form data mapping for one domain
- SourceData: one bibliographic source with a 0-100 reliability
- FableData: one short narrative piece, optionally tied to a domain

Field types are deliberately permissive (mostly Optional) so that the
validator can receive a broken document and report every defect instead of
failing on construction. Attribute names are snake_case; the wire names are
the camelCase aliases.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .vocabulary import CANONICAL_DOMAINS

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    extra="allow",
    coerce_numbers_to_str=True,
)


class DimensionData(BaseModel):
    """Data for one thematic domain."""

    model_config = _MODEL_CONFIG

    description: Optional[str] = Field(None, description="Human-readable summary (>= 10 chars)")
    data: Dict[str, Any] = Field(default_factory=dict, description="Domain facts keyed by topic")


class SourceData(BaseModel):
    """A bibliographic source backing the dossier."""

    model_config = _MODEL_CONFIG

    title: Optional[str] = Field(None, description="Source title (>= 5 chars)")
    url: Optional[str] = Field(None, description="Bare link target")
    kind: Optional[str] = Field(None, description="web, database, documentation, ...")
    author: Optional[str] = None
    published_date: Optional[str] = Field(None, alias="publishedDate")
    accessed_date: Optional[str] = Field(None, alias="accessedDate")
    reliability: Optional[Any] = Field(None, description="Confidence in [0, 100], checked by the validator")
    references: Optional[Any] = None


class FableData(BaseModel):
    """A short narrative piece, optionally attached to one domain."""

    model_config = _MODEL_CONFIG

    title: Optional[str] = Field(None, description="Fable title (>= 5 chars)")
    main_content: Optional[str] = Field(None, alias="mainContent", description="Body (>= 50 chars)")
    order: Optional[Union[int, float]] = None
    dimension_ref: Optional[str] = Field(None, alias="dimensionRef")
    variations: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    inspiration_sources: Optional[Any] = Field(None, alias="inspirationSources")


class ImportDocument(BaseModel):
    """Canonical territory dossier produced by the normalizer."""

    model_config = _MODEL_CONFIG

    dimensions: Dict[str, DimensionData] = Field(default_factory=dict)
    fables: List[FableData] = Field(default_factory=list)
    sources: List[SourceData] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with wire (camelCase) field names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @property
    def canonical_dimension_keys(self) -> List[str]:
        """Present dimension keys that belong to the canonical domain set."""
        return [key for key in CANONICAL_DOMAINS if key in self.dimensions]
