"""Exceptions for report rendering."""


class ReportError(Exception):
    """Base exception for report output failures."""

    pass


class ReportTemplateError(ReportError):
    """Raised when report rendering fails due to a broken template or missing variables."""

    pass
