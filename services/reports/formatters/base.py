"""
Base formatter interface for report export.

A formatter turns a column schema plus an ordered row sequence into the
bytes of one document.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

from models.reports import FileFormat
from ..schemas import ReportSchema


class BaseFormatter(ABC):
    """
    Abstract base class for report export formatters.

    Implementations: XLSXFormatter (single-sheet workbook) and
    PDFFormatter (paginated landscape document).
    """

    @abstractmethod
    def get_file_format(self) -> FileFormat:
        pass

    @abstractmethod
    def get_content_type(self) -> str:
        """MIME type of the produced bytes."""
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """Extension without the dot, e.g. 'xlsx'."""
        pass

    @abstractmethod
    def format(
        self,
        schema: ReportSchema,
        rows: Sequence[Any],
        options: Dict[str, Any]
    ) -> bytes:
        """
        Serialize report rows in schema column order.

        Args:
            schema: Column schema of the report type
            rows: Report rows, rendered in order
            options: Format-specific options (title, date range caption, ...)

        Returns:
            Document bytes

        Raises:
            ValueError: If the document cannot be produced
        """
        pass

    def get_filename(self, base_name: str) -> str:
        """Append this formatter's extension, e.g. 'sales-report' -> 'sales-report.xlsx'."""
        return f"{base_name}.{self.get_file_extension()}"
