"""Integration tests: a normalized document survives serialization unchanged."""

import json

import pytest

from dossier_import.normalization import DossierNormalizer
from dossier_import.parsing.parser import parse_mapping
from dossier_import.sanitization.sanitizer import sanitize, sanitize_with_report

pytestmark = pytest.mark.integration


@pytest.fixture
def normalizer(fixed_now):
    return DossierNormalizer(now=fixed_now)


def _reimport(normalizer, document):
    text = json.dumps(document.to_payload(), ensure_ascii=False)
    report = sanitize_with_report(text)
    return report, normalizer.normalize(parse_mapping(report.text))


@pytest.mark.parametrize("name", ["llm_dossier", "legacy_container"])
def test_normalized_document_is_a_fixed_point(normalizer, raw_dossiers, name):
    """Test that re-importing a normalized document needs no correction."""
    first = normalizer.normalize(parse_mapping(sanitize(raw_dossiers[name])))
    assert first.was_corrected

    report, second = _reimport(normalizer, first.document)

    assert report.corrections == []
    assert second.corrections == []
    assert second.document == first.document


def test_indented_output_also_round_trips(normalizer, raw_dossiers):
    first = normalizer.normalize(parse_mapping(sanitize(raw_dossiers["llm_dossier"])))
    text = json.dumps(first.document.to_payload(), ensure_ascii=False, indent=2)

    second = normalizer.normalize(parse_mapping(sanitize(text)))

    assert second.document == first.document
