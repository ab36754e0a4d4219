"""Import pipeline orchestration: sanitize, parse, normalize, validate, commit."""

import threading
from collections import OrderedDict
from typing import List, Optional, Tuple
from uuid import uuid4

from dossier_import.exceptions import DossierImportError
from dossier_import.logging import get_logger
from dossier_import.logging.context import log_context
from dossier_import.normalization.models import NormalizationResult
from dossier_import.normalization.service import DossierNormalizer
from dossier_import.parsing.parser import parse_mapping
from dossier_import.sanitization.sanitizer import sanitize_with_report
from dossier_import.utils.hashing import hash_string
from dossier_import.validation.models import ValidationContext
from dossier_import.validation.service import DossierValidator

from .models import CommitResult, DocumentPersister, ImportRunLog, PreviewResult

logger = get_logger(__name__, component="pipeline")

Prepared = Tuple[List[str], NormalizationResult]


class ImportPipeline:
    """
    Runs raw import text through the sanitizer, parser, normalizer and validator.

    Stages are pure; the only state kept between calls is an optional LRU
    memo of sanitize/parse/normalize results keyed by the SHA-256 of the raw
    text. The memo is lock-guarded so one pipeline can serve concurrent
    callers.
    """

    def __init__(
        self,
        normalizer: Optional[DossierNormalizer] = None,
        validator: Optional[DossierValidator] = None,
        persister: Optional[DocumentPersister] = None,
        run_log: Optional[ImportRunLog] = None,
        cache_size: int = 0,
    ):
        """
        Initialize the import pipeline.

        Args:
            normalizer: Normalizer to use (defaults to DossierNormalizer())
            validator: Validator to use (defaults to DossierValidator())
            persister: Collaborator storing committed documents
            run_log: Collaborator recording every attempt
            cache_size: Number of memoized results (0 disables the memo)
        """
        self.normalizer = normalizer or DossierNormalizer()
        self.validator = validator or DossierValidator()
        self.persister = persister
        self.run_log = run_log
        self.cache_size = max(0, cache_size)
        self._cache: "OrderedDict[str, Prepared]" = OrderedDict()
        self._lock = threading.Lock()

    def preview(self, raw: str, context: Optional[ValidationContext] = None) -> PreviewResult:
        """
        Sanitize, parse, normalize and validate raw text without committing.

        Raises:
            DossierParseError: If the sanitized text still fails to parse
            DossierStructureError: If no domain container is found
        """
        context = context or ValidationContext(strict_mode=self.validator.strict_mode)

        with log_context(
            import_id=uuid4().hex,
            mode="preview",
            exploration_id=context.exploration_id,
            marche_id=context.marche_id,
        ):
            try:
                result = self._evaluate(raw, context)
            except DossierImportError as e:
                self._record("preview", "failed", context, error_message=e.message)
                raise

            logger.info(
                "Preview completed",
                extra={
                    "event": "pipeline.preview.completed",
                    "valid": result.valid,
                    "corrections": len(result.corrections),
                    "completeness_score": result.validation.completeness_score,
                    "quality_score": result.validation.quality_score,
                },
            )
            self._record(
                "preview",
                "valid" if result.valid else "invalid",
                context,
                result=result,
            )
            return result

    def commit(
        self,
        raw: str,
        exploration_id: Optional[str],
        marche_id: Optional[str],
        strict_mode: Optional[bool] = None,
    ) -> CommitResult:
        """
        Validate raw text and, if valid, hand the document to the persister.

        An invalid document is refused and only diagnostics are returned.
        The persister receives the document as-is; the validator is the only
        trust boundary.

        Raises:
            DossierParseError: If the sanitized text still fails to parse
            DossierStructureError: If no domain container is found
        """
        context = ValidationContext(
            exploration_id=exploration_id,
            marche_id=marche_id,
            strict_mode=self.validator.strict_mode if strict_mode is None else strict_mode,
        )

        with log_context(
            import_id=uuid4().hex,
            mode="commit",
            exploration_id=exploration_id,
            marche_id=marche_id,
        ):
            try:
                preview = self._evaluate(raw, context)
            except DossierImportError as e:
                self._record("commit", "failed", context, error_message=e.message)
                raise

            message = None
            if not preview.valid:
                message = f"Validation failed with {len(preview.validation.errors)} error(s)"
            elif not exploration_id or not marche_id:
                message = "Commit requires both exploration_id and marche_id"
            elif self.persister is None:
                message = "No persistence collaborator configured"

            if message is not None:
                logger.warning(
                    "Commit refused",
                    extra={"event": "pipeline.commit.refused", "reason": message},
                )
                self._record("commit", "refused", context, result=preview, error_message=message)
                return CommitResult(
                    status="refused",
                    preview=preview,
                    exploration_id=exploration_id,
                    marche_id=marche_id,
                    message=message,
                )

            if not self.persister.persist(preview.document, exploration_id, marche_id):
                message = "Persistence collaborator reported a failure"
                logger.error(
                    "Commit failed",
                    extra={"event": "pipeline.commit.failed", "reason": message},
                )
                self._record("commit", "failed", context, result=preview, error_message=message)
                return CommitResult(
                    status="failed",
                    preview=preview,
                    exploration_id=exploration_id,
                    marche_id=marche_id,
                    message=message,
                )

            post_import = self.validator.validate_post_import(exploration_id, marche_id)
            logger.info(
                "Commit completed",
                extra={
                    "event": "pipeline.commit.completed",
                    "post_import_success": post_import.success,
                },
            )
            self._record("commit", "committed", context, result=preview)
            return CommitResult(
                status="committed",
                preview=preview,
                exploration_id=exploration_id,
                marche_id=marche_id,
                post_import=post_import,
            )

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _evaluate(self, raw: str, context: ValidationContext) -> PreviewResult:
        sanitizer_corrections, normalization = self._prepare(raw)
        validation = self.validator.validate(normalization.document, context)
        return PreviewResult(
            document=normalization.document,
            corrections=[*sanitizer_corrections, *normalization.corrections],
            warnings=list(normalization.warnings),
            validation=validation,
        )

    def _prepare(self, raw: str) -> Prepared:
        """Sanitize, parse and normalize, going through the memo when enabled.

        Every caller gets its own deep copy of the memoized document, so
        changes made to one result never reach the memo or later results.
        """
        if self.cache_size == 0:
            return self._prepare_uncached(raw)

        key = hash_string(raw)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                logger.debug("Memoized result reused", extra={"event": "pipeline.cache.hit"})
                return _detached(cached)

        prepared = self._prepare_uncached(raw)

        with self._lock:
            self._cache[key] = prepared
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return _detached(prepared)

    def _prepare_uncached(self, raw: str) -> Prepared:
        report = sanitize_with_report(raw)
        parsed = parse_mapping(report.text)
        return list(report.corrections), self.normalizer.normalize(parsed)

    def _record(
        self,
        mode: str,
        status: str,
        context: ValidationContext,
        result: Optional[PreviewResult] = None,
        error_message: Optional[str] = None,
    ) -> None:
        if self.run_log is None:
            return
        self.run_log.record_run(
            mode=mode,
            status=status,
            exploration_id=context.exploration_id,
            marche_id=context.marche_id,
            validation=result.validation if result is not None else None,
            corrections_count=len(result.corrections) if result is not None else 0,
            error_message=error_message,
        )


def _detached(prepared: Prepared) -> Prepared:
    sanitizer_corrections, normalization = prepared
    return list(sanitizer_corrections), NormalizationResult(
        document=normalization.document.model_copy(deep=True),
        corrections=list(normalization.corrections),
        warnings=list(normalization.warnings),
    )
