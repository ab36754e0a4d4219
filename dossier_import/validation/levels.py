"""The three validation levels.

Each level is a pure function of the document (and context) returning its
own LevelResult; nothing short-circuits, so a caller sees every defect.
"""

from typing import Any, List, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from dossier_import.domain.models import ImportDocument
from dossier_import.domain.vocabulary import CANONICAL_DOMAINS, SOURCE_KINDS

from .models import LevelResult, ValidationContext

MIN_DESCRIPTION_LENGTH = 10
MIN_TITLE_LENGTH = 5
MIN_FABLE_CONTENT_LENGTH = 50

STRICT_MIN_DOMAINS = 4
STRICT_MIN_SOURCES = 3
STRICT_MIN_FABLES = 1

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _long_enough(value: Optional[str], minimum: int) -> bool:
    return isinstance(value, str) and len(value.strip()) >= minimum


def _is_valid_url(value: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_syntax(document: ImportDocument) -> LevelResult:
    """Check required fields and their minimal shape."""
    result = LevelResult()

    if not document.dimensions:
        result.errors.append("No dimensions provided")
    if not document.sources:
        result.errors.append("At least one source is required")

    for key, dimension in document.dimensions.items():
        if not _long_enough(dimension.description, MIN_DESCRIPTION_LENGTH):
            result.errors.append(
                f"Dimension '{key}': description of at least {MIN_DESCRIPTION_LENGTH} characters required"
            )
        if not dimension.data:
            result.errors.append(f"Dimension '{key}': non-empty data required")

    for position, source in enumerate(document.sources, 1):
        if not _long_enough(source.title, MIN_TITLE_LENGTH):
            result.errors.append(
                f"Source {position}: title of at least {MIN_TITLE_LENGTH} characters required"
            )

        if not source.kind:
            result.errors.append(f"Source {position}: kind required")
        elif source.kind not in SOURCE_KINDS:
            result.warnings.append(f"Source {position}: unrecognized kind '{source.kind}'")

        if source.reliability is None:
            result.errors.append(f"Source {position}: reliability required")
        elif not _is_number(source.reliability) or not 0 <= source.reliability <= 100:
            result.errors.append(f"Source {position}: reliability must be between 0 and 100")

        if source.url and not _is_valid_url(source.url):
            result.warnings.append(f"Source {position}: URL may be invalid ({source.url})")

    for position, fable in enumerate(document.fables, 1):
        if not _long_enough(fable.title, MIN_TITLE_LENGTH):
            result.errors.append(
                f"Fable {position}: title of at least {MIN_TITLE_LENGTH} characters required"
            )
        if not _long_enough(fable.main_content, MIN_FABLE_CONTENT_LENGTH):
            result.errors.append(
                f"Fable {position}: main content of at least {MIN_FABLE_CONTENT_LENGTH} characters required"
            )

    return result


def _declared_source_titles(data: Any) -> List[str]:
    references = data.get("sources") if isinstance(data, dict) else None
    if not isinstance(references, list):
        return []
    titles = []
    for reference in references:
        if isinstance(reference, str):
            titles.append(reference)
        elif isinstance(reference, dict) and isinstance(reference.get("title"), str):
            titles.append(reference["title"])
    return titles


def validate_semantics(document: ImportDocument) -> LevelResult:
    """Check cross-references and canonical domain coverage."""
    result = LevelResult()

    for position, fable in enumerate(document.fables, 1):
        if fable.dimension_ref and fable.dimension_ref not in document.dimensions:
            result.warnings.append(
                f"Fable {position} ('{fable.title}') references unknown dimension '{fable.dimension_ref}'"
            )

    known_titles = {source.title for source in document.sources if source.title}
    for key, dimension in document.dimensions.items():
        missing = [title for title in _declared_source_titles(dimension.data) if title not in known_titles]
        if missing:
            result.warnings.append(
                f"Dimension '{key}' references sources not found in the document: {', '.join(missing)}"
            )

    missing_domains = [key for key in CANONICAL_DOMAINS if key not in document.dimensions]
    if len(missing_domains) > 4:
        result.warnings.append(f"Several canonical domains missing: {', '.join(missing_domains[:3])}...")
    elif missing_domains:
        result.warnings.append(f"Canonical domains missing: {', '.join(missing_domains)}")

    return result


def validate_context(document: ImportDocument, context: ValidationContext) -> LevelResult:
    """Check target identifiers and, in strict mode, minimum content counts.

    Returns an empty result when no identifier is supplied.
    """
    result = LevelResult()
    if not context.has_identifiers:
        return result

    for name, value in (("exploration_id", context.exploration_id), ("marche_id", context.marche_id)):
        if value is not None and (not isinstance(value, str) or not value.strip()):
            result.errors.append(f"{name} must be a non-empty string")

    if context.strict_mode:
        present = len(document.canonical_dimension_keys)
        if present < STRICT_MIN_DOMAINS:
            result.errors.append(
                f"Strict mode: at least {STRICT_MIN_DOMAINS} canonical domains required ({present} present)"
            )
        if len(document.sources) < STRICT_MIN_SOURCES:
            result.errors.append(
                f"Strict mode: at least {STRICT_MIN_SOURCES} sources required ({len(document.sources)} present)"
            )
        if len(document.fables) < STRICT_MIN_FABLES:
            result.errors.append("Strict mode: at least one fable required")

    return result
