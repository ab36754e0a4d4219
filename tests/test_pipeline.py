"""Unit tests for the import pipeline.

Tests the ImportPipeline orchestration including:
- Preview diagnostics (corrections, warnings, validation)
- Commit decisions (refused, failed, committed)
- Import-run recording for every attempt
- Memoization and its lock-guarded LRU eviction
- Logging context around each attempt
"""

import json
import threading
from unittest.mock import MagicMock

import pytest

from dossier_import.exceptions import DossierParseError, DossierStructureError
from dossier_import.logging.context import get_log_context
from dossier_import.normalization import DossierNormalizer
from dossier_import.pipeline import CommitResult, ImportPipeline, PreviewResult
from dossier_import.pipeline.models import DocumentPersister
from dossier_import.validation import DossierValidator, ValidationContext

from tests.helpers.dossiers import RecordingStore, build_payload

INVALID_RAW = '{"dimensions": {"contexte_hydrologique": {"description": "court", "data": {}}}}'


@pytest.fixture
def valid_raw():
    return json.dumps(build_payload(), ensure_ascii=False)


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def pipeline(fixed_now, store):
    return ImportPipeline(
        normalizer=DossierNormalizer(now=fixed_now),
        persister=store,
        run_log=store,
    )


class TestPreview:
    def test_llm_dossier(self, pipeline, raw_dossiers):
        result = pipeline.preview(raw_dossiers["llm_dossier"])

        assert isinstance(result, PreviewResult)
        assert result.valid is True
        assert result.corrections[0] == "Python literals None/True/False rewritten outside strings"
        assert "Dimension 'tachnodiversite' mapped to 'technodiversite' (fuzzy match)" in result.corrections
        assert result.warnings == []
        assert result.validation.warnings == [
            "Canonical domains missing: vocabulaire_local, empreintes_humaines, projection_2035_2045"
        ]
        assert result.validation.completeness_score == 41

    def test_clean_document_has_no_corrections(self, pipeline, valid_raw):
        result = pipeline.preview(valid_raw)

        assert result.valid is True
        assert result.corrections == []
        assert result.validation.quality_score == 100

    def test_to_dict(self, pipeline, valid_raw):
        payload = pipeline.preview(valid_raw).to_dict()

        assert set(payload) == {"normalizedDocument", "corrections", "warnings", "validation"}
        assert payload["normalizedDocument"]["dimensions"].keys() == build_payload()["dimensions"].keys()

    def test_records_run(self, pipeline, store):
        pipeline.preview(INVALID_RAW)

        assert len(store.runs) == 1
        run = store.runs[0]
        assert (run["mode"], run["status"]) == ("preview", "invalid")
        assert run["validation"].valid is False

    def test_parse_failure_recorded_and_raised(self, pipeline, store, raw_dossiers):
        with pytest.raises(DossierParseError):
            pipeline.preview(raw_dossiers["unbalanced_parentheses"])

        assert store.runs[0]["status"] == "failed"
        assert store.runs[0]["error_message"].startswith("Invalid structured text")

    def test_structure_failure_raised(self, pipeline, raw_dossiers):
        with pytest.raises(DossierStructureError):
            pipeline.preview(raw_dossiers["no_container"])

    def test_context_enables_contextual_checks(self, pipeline, valid_raw):
        result = pipeline.preview(valid_raw, ValidationContext(exploration_id=" ", marche_id="m-12"))

        assert result.valid is False
        assert "exploration_id must be a non-empty string" in result.validation.errors

    def test_works_without_collaborators(self, fixed_now, valid_raw):
        pipeline = ImportPipeline(normalizer=DossierNormalizer(now=fixed_now))
        assert pipeline.preview(valid_raw).valid is True


class TestCommit:
    """Test commit decisions."""

    def test_committed(self, pipeline, store, valid_raw):
        result = pipeline.commit(valid_raw, "e-1", "m-12")

        assert isinstance(result, CommitResult)
        assert result.status == "committed"
        assert result.committed is True
        assert result.post_import.success is True
        document, exploration_id, marche_id = store.persisted[0]
        assert (exploration_id, marche_id) == ("e-1", "m-12")
        assert document == result.preview.document
        assert store.runs[-1]["status"] == "committed"

    def test_invalid_document_refused(self, pipeline, store):
        result = pipeline.commit(INVALID_RAW, "e-1", "m-12")

        assert result.status == "refused"
        assert result.message == "Validation failed with 3 error(s)"
        assert store.persisted == []
        assert store.runs[-1]["status"] == "refused"

    @pytest.mark.parametrize("exploration_id,marche_id", [(None, "m-12"), ("e-1", None), (None, None)])
    def test_missing_identifier_refused(self, pipeline, store, valid_raw, exploration_id, marche_id):
        result = pipeline.commit(valid_raw, exploration_id, marche_id)

        assert result.status == "refused"
        assert result.message == "Commit requires both exploration_id and marche_id"
        assert store.persisted == []

    def test_refused_without_persister(self, fixed_now, valid_raw):
        pipeline = ImportPipeline(normalizer=DossierNormalizer(now=fixed_now))
        result = pipeline.commit(valid_raw, "e-1", "m-12")

        assert result.status == "refused"
        assert result.message == "No persistence collaborator configured"

    def test_persister_failure(self, fixed_now, valid_raw):
        store = RecordingStore(succeed=False)
        pipeline = ImportPipeline(normalizer=DossierNormalizer(now=fixed_now), persister=store, run_log=store)

        result = pipeline.commit(valid_raw, "e-1", "m-12")

        assert result.status == "failed"
        assert result.post_import is None
        assert store.runs[-1]["status"] == "failed"

    def test_strict_mode_refuses_sparse_document(self, pipeline, store):
        raw = json.dumps(build_payload(domains=["contexte_hydrologique"], fables=[]))

        lenient = pipeline.commit(raw, "e-1", "m-12")
        strict = pipeline.commit(raw, "e-1", "m-12", strict_mode=True)

        assert lenient.status == "committed"
        assert strict.status == "refused"
        assert any(e.startswith("Strict mode") for e in strict.preview.validation.errors)

    def test_validator_strict_default(self, fixed_now, store):
        pipeline = ImportPipeline(
            normalizer=DossierNormalizer(now=fixed_now),
            validator=DossierValidator(strict_mode=True),
            persister=store,
        )
        raw = json.dumps(build_payload(domains=["contexte_hydrologique"], fables=[]))

        assert pipeline.commit(raw, "e-1", "m-12").status == "refused"

    def test_to_dict_omits_document(self, pipeline, valid_raw):
        payload = pipeline.commit(valid_raw, "e-1", "m-12").to_dict()

        assert "normalizedDocument" not in payload
        assert payload["status"] == "committed"
        assert payload["postImport"] == {"success": True, "issues": []}

    def test_log_context_visible_to_persister(self, fixed_now, valid_raw):
        seen = {}

        class ContextCapturingPersister(DocumentPersister):
            def persist(self, document, exploration_id, marche_id):
                seen.update(get_log_context())
                return True

        pipeline = ImportPipeline(normalizer=DossierNormalizer(now=fixed_now), persister=ContextCapturingPersister())
        pipeline.commit(valid_raw, "e-1", "m-12")

        assert seen["mode"] == "commit"
        assert seen["exploration_id"] == "e-1"
        assert seen["marche_id"] == "m-12"
        assert len(seen["import_id"]) == 32
        assert get_log_context() == {}


class TestMemoization:
    """Test the optional LRU memo of sanitize/parse/normalize results."""

    def _pipeline(self, fixed_now, cache_size):
        normalizer = MagicMock(wraps=DossierNormalizer(now=fixed_now))
        return ImportPipeline(normalizer=normalizer, cache_size=cache_size), normalizer

    def test_disabled_by_default(self, fixed_now, valid_raw):
        pipeline, normalizer = self._pipeline(fixed_now, 0)

        pipeline.preview(valid_raw)
        pipeline.preview(valid_raw)

        assert normalizer.normalize.call_count == 2

    def test_cached_result_equal(self, fixed_now, raw_dossiers):
        pipeline, normalizer = self._pipeline(fixed_now, 4)

        first = pipeline.preview(raw_dossiers["llm_dossier"])
        second = pipeline.preview(raw_dossiers["llm_dossier"])

        assert normalizer.normalize.call_count == 1
        assert first == second

    def test_cached_documents_not_shared(self, fixed_now, raw_dossiers):
        pipeline, normalizer = self._pipeline(fixed_now, 4)

        first = pipeline.preview(raw_dossiers["llm_dossier"])
        first.document.dimensions["contexte_hydrologique"].data["injected"] = True
        second = pipeline.preview(raw_dossiers["llm_dossier"])

        assert normalizer.normalize.call_count == 1
        assert "injected" not in second.document.dimensions["contexte_hydrologique"].data
        assert second.document is not first.document

    def test_least_recently_used_evicted(self, fixed_now):
        pipeline, normalizer = self._pipeline(fixed_now, 2)
        raws = [json.dumps(build_payload(data_keys=n)) for n in (1, 2, 3)]

        pipeline.preview(raws[0])
        pipeline.preview(raws[1])
        pipeline.preview(raws[0])
        pipeline.preview(raws[2])
        assert normalizer.normalize.call_count == 3

        pipeline.preview(raws[0])
        assert normalizer.normalize.call_count == 3

        pipeline.preview(raws[1])
        assert normalizer.normalize.call_count == 4

    def test_clear_cache(self, fixed_now, valid_raw):
        pipeline, normalizer = self._pipeline(fixed_now, 4)

        pipeline.preview(valid_raw)
        pipeline.clear_cache()
        pipeline.preview(valid_raw)

        assert normalizer.normalize.call_count == 2

    def test_concurrent_previews(self, fixed_now, raw_dossiers):
        pipeline, _ = self._pipeline(fixed_now, 8)
        results = []
        lock = threading.Lock()

        def run():
            result = pipeline.preview(raw_dossiers["llm_dossier"])
            with lock:
                results.append(result.to_dict())

        threads = [threading.Thread(target=run) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result == results[0] for result in results)
