"""Context builders for report templates.

Preview and commit results are flattened into the same context shape so a
single template can show corrections, warnings, errors and scores together.
"""

from typing import Any, Dict, Optional

from dossier_import.pipeline.models import CommitResult, PreviewResult


def build_report_context(
    preview: PreviewResult,
    source_name: Optional[str] = None,
    commit: Optional[CommitResult] = None,
) -> Dict[str, Any]:
    """Build the template context for one import attempt.

    Args:
        preview: Diagnostics of the attempt
        source_name: Input file name shown in the header ('-' for stdin)
        commit: Commit outcome, when the attempt was a commit

    Returns:
        Dictionary with keys mode, source_name, valid, completeness_score,
        quality_score, corrections, warnings, validation_errors,
        validation_warnings, counts and commit (None for previews).
    """
    document = preview.document
    validation = preview.validation

    commit_context = None
    if commit is not None:
        commit_context = {
            "status": commit.status,
            "exploration_id": commit.exploration_id or "-",
            "marche_id": commit.marche_id or "-",
            "message": commit.message,
            "post_import_issues": list(commit.post_import.issues) if commit.post_import else [],
        }

    return {
        "mode": "commit" if commit is not None else "preview",
        "source_name": source_name or "-",
        "valid": validation.valid,
        "completeness_score": validation.completeness_score,
        "quality_score": validation.quality_score,
        "corrections": list(preview.corrections),
        "warnings": list(preview.warnings),
        "validation_errors": list(validation.errors),
        "validation_warnings": list(validation.warnings),
        "counts": {
            "dimensions": len(document.dimensions),
            "canonical_dimensions": len(document.canonical_dimension_keys),
            "sources": len(document.sources),
            "fables": len(document.fables),
        },
        "commit": commit_context,
    }
