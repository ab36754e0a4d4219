"""Human-readable import reports.

- ReportRenderer: Jinja2-based rendering of preview and commit results
- build_report_context: flattens a result into template variables
- ReportError: base exception for report output failures
- ReportTemplateError: raised when a template fails to render
"""

from .models import ReportError, ReportTemplateError
from .payloads import build_report_context
from .renderer import ReportRenderer

__all__ = [
    "ReportError",
    "ReportRenderer",
    "ReportTemplateError",
    "build_report_context",
]
