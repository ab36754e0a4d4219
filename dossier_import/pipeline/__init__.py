"""Pipeline orchestration for previewing and committing imports."""

from .models import CommitResult, DocumentPersister, ImportRunLog, PreviewResult
from .runner import ImportPipeline

__all__ = [
    "ImportPipeline",
    "PreviewResult",
    "CommitResult",
    "DocumentPersister",
    "ImportRunLog",
]
