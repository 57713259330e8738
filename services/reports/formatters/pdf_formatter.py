"""
PDF output formatter using WeasyPrint and Jinja2 templates.

Renders the report HTML template with the schema labels and row cells and
converts it to a landscape, automatically paginated PDF.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from models.reports import FileFormat
from ..config import DEFAULT_ORGANIZATION_NAME
from ..schemas import ReportSchema
from .base import BaseFormatter

logger = logging.getLogger(__name__)

# WeasyPrint needs native Pango/Cairo libraries; a missing library surfaces
# as OSError at import time
try:
    from weasyprint import HTML, CSS
    WEASYPRINT_AVAILABLE = True
except (ImportError, OSError):
    WEASYPRINT_AVAILABLE = False
    logger.warning("weasyprint not installed - PDF formatting unavailable")


# Template directory relative to this file
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_NAME = "report.html"
STYLESHEET_NAME = "styles.css"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(['html', 'xml'])
)


def render_report_html(
    schema: ReportSchema,
    rows: Sequence[Any],
    options: Dict[str, Any]
) -> str:
    """
    Render the report HTML that the PDF is produced from.

    Args:
        schema: Column schema of the report type
        rows: Report rows
        options: See PDFFormatter.format

    Returns:
        HTML document as a string
    """
    organization = options.get('organization_name') or DEFAULT_ORGANIZATION_NAME
    title = options.get('title') or schema.title

    context = {
        'heading': f"{organization} - {title}",
        'date_range': options.get('date_range') or "",
        'labels': schema.labels,
        'rows': [
            [column.document_value(row) for column in schema.columns]
            for row in rows
        ],
    }
    return _env.get_template(TEMPLATE_NAME).render(**context)


class PDFFormatter(BaseFormatter):
    """
    Formatter that outputs report rows as PDF using WeasyPrint.

    Supports:
    - A4 landscape pages, paginated by the layout engine
    - Bold "<organization> - <title>" heading and a date range caption
    - Table header repeated on every page
    """

    def __init__(self):
        """Initialize formatter and check dependencies."""
        if not WEASYPRINT_AVAILABLE:
            raise ImportError(
                "weasyprint is required for PDF formatting. "
                "Install with: pip install weasyprint"
            )

    def get_file_format(self) -> FileFormat:
        """Return PDF file format."""
        return FileFormat.PDF

    def get_content_type(self) -> str:
        """Return PDF MIME type."""
        return "application/pdf"

    def get_file_extension(self) -> str:
        """Return pdf extension."""
        return "pdf"

    def format(
        self,
        schema: ReportSchema,
        rows: Sequence[Any],
        options: Dict[str, Any]
    ) -> bytes:
        """
        Format report rows as PDF.

        Args:
            schema: Column schema of the report type
            rows: Report rows
            options: Configuration options:
                - title (str): Report title (default: schema.title)
                - date_range (str): Caption line under the title
                - organization_name (str): Heading prefix

        Returns:
            PDF file as bytes

        Raises:
            ValueError: If formatting fails
        """
        logger.info(
            f"Formatting {len(rows)} {schema.sheet_name} rows as PDF"
        )

        try:
            html_content = render_report_html(schema, rows, options)

            stylesheets = []
            css_path = TEMPLATES_DIR / STYLESHEET_NAME
            if css_path.exists():
                stylesheets.append(CSS(filename=str(css_path)))

            html = HTML(string=html_content, base_url=str(TEMPLATES_DIR))
            pdf_bytes = html.write_pdf(stylesheets=stylesheets)

        except Exception as e:
            logger.error(f"PDF formatting failed: {e}")
            raise ValueError(f"Failed to format data as PDF: {e}") from e

        logger.info(f"Generated PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes
