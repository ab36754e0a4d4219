"""Custom exceptions for configuration management."""

from pathlib import Path
from typing import List, Optional

from dossier_import.exceptions import format_diagnostics


class ConfigurationError(Exception):
    """
    Exception raised when the YAML file or the environment is invalid.

    Attributes:
        message: Primary description of the failure
        errors: Every validation problem found in one pass
        suggestions: Hints for fixing them
        source: Configuration file involved, or None for the environment
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        source: Optional[Path] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.source = source

        headline = f"{message} ({source})" if source is not None else message
        super().__init__(
            format_diagnostics(headline, self.errors, self.suggestions, errors_heading="Validation Errors:")
        )
