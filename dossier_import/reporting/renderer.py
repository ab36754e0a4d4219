"""Plain-text report rendering using Jinja2.

Wraps a Jinja2 environment with strict undefined checking so a template that
references a missing variable fails loudly instead of printing blanks.
"""

from typing import Any, Dict, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from dossier_import.logging import get_logger
from dossier_import.pipeline.models import CommitResult, PreviewResult

from .models import ReportTemplateError
from .payloads import build_report_context

logger = get_logger(__name__)


class ReportRenderer:
    """Renders import reports from the dossier_import.reporting package templates."""

    def __init__(
        self,
        template_dir: str = "report_templates",
        report_template: str = "import_report.txt.j2",
    ):
        """Initialize the renderer.

        Args:
            template_dir: Directory name within the dossier_import.reporting package
            report_template: Filename of the report template
        """
        self.report_template_name = report_template

        self.env = Environment(
            loader=PackageLoader("dossier_import.reporting", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        logger.debug(f"Initialized ReportRenderer with templates from {template_dir}")

    def render(self, context: Dict[str, Any]) -> str:
        """Render the report template with a prepared context.

        Raises:
            ReportTemplateError: If template rendering fails
        """
        try:
            template = self.env.get_template(self.report_template_name)
            return template.render(context)
        except TemplateError as e:
            error_msg = f"Report rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise ReportTemplateError(error_msg) from e

    def render_preview(self, preview: PreviewResult, source_name: Optional[str] = None) -> str:
        return self.render(build_report_context(preview, source_name=source_name))

    def render_commit(self, commit: CommitResult, source_name: Optional[str] = None) -> str:
        return self.render(build_report_context(commit.preview, source_name=source_name, commit=commit))
