"""
Excel XLSX output formatter.

Creates a single-sheet workbook: a bold header row followed by one row per
report row, with typed numeric cells, literal text cells and content-fitted
column widths.
"""

import io
import logging
from typing import Any, Dict, Sequence

from models.reports import FileFormat
from ..schemas import ReportSchema
from .base import BaseFormatter

logger = logging.getLogger(__name__)

# Lazy import openpyxl to avoid import errors if not installed
try:
    from openpyxl import Workbook
    from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
    from openpyxl.styles import Font
    from openpyxl.utils import get_column_letter
    OPENPYXL_AVAILABLE = True
except ImportError:
    OPENPYXL_AVAILABLE = False
    logger.warning("openpyxl not installed - XLSX formatting unavailable")

# Widest column, in characters
MAX_COLUMN_WIDTH = 50


class XLSXFormatter(BaseFormatter):
    """
    Formatter that outputs report rows as Excel XLSX.

    Supports:
    - One worksheet named after the report type
    - Bold header row from the schema labels
    - Numeric cells for numeric columns, text elsewhere
    - Auto-column width
    """

    def __init__(self):
        """Initialize formatter and check dependencies."""
        if not OPENPYXL_AVAILABLE:
            raise ImportError(
                "openpyxl is required for XLSX formatting. "
                "Install with: pip install openpyxl"
            )

    def get_file_format(self) -> FileFormat:
        """Return XLSX file format."""
        return FileFormat.XLSX

    def get_content_type(self) -> str:
        """Return Excel MIME type."""
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def get_file_extension(self) -> str:
        """Return xlsx extension."""
        return "xlsx"

    def format(
        self,
        schema: ReportSchema,
        rows: Sequence[Any],
        options: Dict[str, Any]
    ) -> bytes:
        """
        Format report rows as Excel XLSX.

        Args:
            schema: Column schema of the report type
            rows: Report rows
            options: Configuration options:
                - sheet_name (str): Worksheet title (default: schema.sheet_name)

        Returns:
            XLSX file as bytes

        Raises:
            ValueError: If formatting fails
        """
        logger.info(
            f"Formatting {len(rows)} {schema.sheet_name} rows as XLSX"
        )

        sheet_name = options.get('sheet_name') or schema.sheet_name

        try:
            wb = Workbook()
            ws = wb.active
            ws.title = sheet_name

            self._write_header_row(ws, schema.labels, 1)

            for row_idx, row in enumerate(rows, start=2):
                for col_idx, column in enumerate(schema.columns, start=1):
                    value = column.workbook_value(row)
                    if column.numeric:
                        ws.cell(row=row_idx, column=col_idx, value=value)
                    else:
                        self._write_text_cell(ws, row_idx, col_idx, value)

            self._auto_fit_columns(ws, len(schema.columns))

            # Save to bytes
            output = io.BytesIO()
            wb.save(output)
            content = output.getvalue()

        except Exception as e:
            logger.error(f"XLSX formatting failed: {e}")
            raise ValueError(f"Failed to format data as XLSX: {e}") from e

        logger.info(f"Generated XLSX: {len(content)} bytes")
        return content

    def _write_header_row(
        self,
        ws,
        labels: Sequence[str],
        row: int
    ) -> None:
        """Write a bold header row."""
        header_font = Font(bold=True)

        for col_idx, label in enumerate(labels, start=1):
            cell = ws.cell(row=row, column=col_idx, value=label)
            cell.font = header_font

    def _write_text_cell(self, ws, row: int, column: int, text: str) -> None:
        """
        Write a literal string cell.

        Control characters that XLSX cannot store are dropped, and the type is
        pinned to string so text starting with "=" is never saved as a formula.
        """
        cell = ws.cell(row=row, column=column, value=ILLEGAL_CHARACTERS_RE.sub("", text))
        cell.data_type = "s"

    def _auto_fit_columns(self, ws, num_columns: int) -> None:
        """Auto-fit column widths based on content."""
        for col_idx in range(1, num_columns + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for cell in ws[column_letter]:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column_letter].width = min(max_length + 2, MAX_COLUMN_WIDTH)
