"""Unit tests for domain models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from dossier_import.domain.models import DimensionData, FableData, ImportDocument, SourceData
from dossier_import.domain.records import ImportRun, StoredFable, TerritoryContext
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS

from tests.helpers.dossiers import build_payload


class TestImportDocument:
    """Tests for the canonical document model."""

    def test_wire_aliases(self):
        fable = FableData.model_validate({"title": "Le héron", "mainContent": "Texte", "dimensionRef": "technodiversite"})
        source = SourceData.model_validate({"title": "Agence", "accessedDate": "2026-10-18"})

        assert fable.main_content == "Texte"
        assert fable.dimension_ref == "technodiversite"
        assert source.accessed_date == "2026-10-18"

    def test_populate_by_field_name(self):
        fable = FableData(title="Le héron", main_content="Texte")
        assert fable.main_content == "Texte"

    def test_permissive_construction(self):
        """Test that a broken document still builds so the validator can report on it."""
        document = ImportDocument.model_validate({
            "dimensions": {"contexte_hydrologique": {}},
            "sources": [{"reliability": 250}],
            "fables": [{}],
        })

        assert document.dimensions["contexte_hydrologique"].description is None
        assert document.dimensions["contexte_hydrologique"].data == {}
        assert document.sources[0].reliability == 250

    def test_unknown_fields_kept(self):
        source = SourceData.model_validate({"title": "Agence", "isbn": "978-2"})
        assert source.model_dump()["isbn"] == "978-2"

    def test_reliability_kept_as_given(self):
        source = SourceData.model_validate({"title": "Agence", "reliability": "high"})
        assert source.reliability == "high"

    def test_numbers_coerced_to_text_fields(self):
        source = SourceData.model_validate({"title": 2045, "publishedDate": 2021})

        assert source.title == "2045"
        assert source.published_date == "2021"

    def test_frozen(self):
        dimension = DimensionData(description="Bassin versant de la Sèvre")

        with pytest.raises(ValidationError):
            dimension.description = "autre"

    def test_to_payload_uses_aliases_and_drops_none(self):
        payload = build_payload()
        document = ImportDocument.model_validate(payload)

        out = document.to_payload()

        assert out["fables"][0]["mainContent"] == payload["fables"][0]["mainContent"]
        assert "main_content" not in out["fables"][0]
        assert "author" not in out["sources"][0]
        assert out["sources"][0]["accessedDate"] == "2026-10-18"
        assert out["metadata"] == payload["metadata"]

    def test_to_payload_round_trip(self, complete_document):
        assert ImportDocument.model_validate(complete_document.to_payload()) == complete_document

    def test_canonical_dimension_keys_follow_canonical_order(self):
        document = ImportDocument.model_validate({
            "dimensions": {
                "technodiversite": {},
                "cle_inconnue": {},
                "contexte_hydrologique": {},
            }
        })

        assert document.canonical_dimension_keys == ["contexte_hydrologique", "technodiversite"]

    def test_canonical_domain_set(self):
        assert len(CANONICAL_DOMAINS) == 8
        assert CANONICAL_DOMAINS[0] == "contexte_hydrologique"


class TestRecords:
    """Tests for persisted record models."""

    def test_naive_datetimes_become_utc(self):
        run = ImportRun(mode="preview", status="valid", created_at=datetime(2026, 10, 18, 9, 30))
        assert run.created_at.tzinfo == timezone.utc

    def test_aware_datetimes_converted(self):
        paris = timezone(timedelta(hours=2))
        fable = StoredFable(
            exploration_id="e-1",
            marche_id="m-12",
            created_at=datetime(2026, 10, 18, 11, 30, tzinfo=paris),
        )

        assert fable.created_at == datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
        assert fable.status == "draft"
        assert fable.tags == []

    def test_context_requires_identifiers(self):
        now = datetime(2026, 10, 18, tzinfo=timezone.utc)

        with pytest.raises(ValidationError):
            TerritoryContext(exploration_id="", marche_id="m-12", created_at=now, updated_at=now)

    def test_context_score_bounds(self):
        now = datetime(2026, 10, 18, tzinfo=timezone.utc)

        with pytest.raises(ValidationError):
            TerritoryContext(
                exploration_id="e-1", marche_id="m-12", completeness_score=101, created_at=now, updated_at=now
            )
