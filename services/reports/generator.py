"""
Report service orchestrator.

Coordinates the report pipeline:
1. Validate the report type and date range
2. Aggregate rows with the report type's aggregator
3. Render the rows through the report type's column schema
4. Return the bytes with the export filename and media type

Every call reads fresh snapshots and builds a fresh row list; nothing is
cached or shared between calls.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from models.reports import FileFormat, ReportType
from .aggregators import (
    AttendanceAggregator,
    BaseAggregator,
    OrdersAggregator,
    SalesAggregator,
)
from .config import ReportSettings
from .formatters import get_formatter, BaseFormatter
from .schemas import ATTENDANCE_SCHEMA, ORDERS_SCHEMA, SALES_SCHEMA, ReportSchema
from .sources import RecordSource

logger = logging.getLogger(__name__)


class ReportValidationError(ValueError):
    """Raised when a report request is incomplete or names an unknown type or format."""
    pass


class ReportGenerationError(Exception):
    """Exception raised when a report cannot be serialized."""
    pass


@dataclass(frozen=True)
class ReportDefinition:
    """Strategy table entry: how one report type is aggregated and laid out."""

    aggregator_class: Type[BaseAggregator]
    schema: ReportSchema
    # Request field that feeds the aggregator's secondary filter
    filter_field: str


REPORT_DEFINITIONS: Dict[ReportType, ReportDefinition] = {
    ReportType.SALES: ReportDefinition(SalesAggregator, SALES_SCHEMA, "agent_id"),
    ReportType.ATTENDANCE: ReportDefinition(AttendanceAggregator, ATTENDANCE_SCHEMA, "agent_id"),
    ReportType.ORDERS: ReportDefinition(OrdersAggregator, ORDERS_SCHEMA, "status"),
}


@dataclass(frozen=True)
class ExportResult:
    """Serialized report ready to be returned to a caller."""

    content: bytes
    filename: str
    content_type: str


def date_range_caption(from_date: date, to_date: date) -> str:
    """Caption line printed under the PDF title."""
    return f"From {from_date.isoformat()} to {to_date.isoformat()}"


def export_filename(report_type: ReportType, formatter: BaseFormatter) -> str:
    """Fixed export filename, e.g. 'sales-report.xlsx'."""
    return formatter.get_filename(f"{report_type.value}-report")


class ReportService:
    """
    Main orchestrator for report aggregation and export.

    Selects the aggregator and column schema for a report type from
    REPORT_DEFINITIONS and hands the rows to the requested formatter.
    """

    def __init__(
        self,
        source: RecordSource,
        settings: Optional[ReportSettings] = None
    ):
        """
        Initialize the service with its dependencies.

        Args:
            source: Read-only provider of invoices, attendance and orders
            settings: Report settings; loaded from env if omitted
        """
        self._source = source
        self._settings = settings or ReportSettings.from_env()

    def build_report(
        self,
        report_type: Union[ReportType, str],
        from_date: Optional[date],
        to_date: Optional[date],
        agent_id: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Any]:
        """
        Aggregate the rows of one report.

        The agent filter applies to sales and attendance, the status filter
        to orders; the other filter is ignored.

        Args:
            report_type: Report type enum or tag ('sales', 'ATTENDANCE', ...)
            from_date: First day of the window (inclusive)
            to_date: Last day of the window (inclusive)
            agent_id: Optional agent filter
            status: Optional order status filter

        Returns:
            Fresh list of report rows; empty when from_date is after to_date

        Raises:
            ReportValidationError: If the type is unknown or a date is missing
        """
        report_type = self._resolve_report_type(report_type)
        from_date, to_date = self._validate_dates(from_date, to_date)
        definition = REPORT_DEFINITIONS[report_type]

        filters = {"agent_id": agent_id, "status": status}
        aggregator = definition.aggregator_class(self._source, self._settings)
        return aggregator.aggregate(from_date, to_date, filters[definition.filter_field])

    def render_workbook(
        self,
        report_type: Union[ReportType, str],
        rows: Sequence[Any]
    ) -> bytes:
        """
        Serialize report rows as a single-sheet XLSX workbook.

        Raises:
            ReportValidationError: If the type is unknown
            ReportGenerationError: If the workbook cannot be produced
        """
        report_type = self._resolve_report_type(report_type)
        schema = REPORT_DEFINITIONS[report_type].schema
        return self._render(FileFormat.XLSX, schema, rows, {})

    def render_document(
        self,
        report_type: Union[ReportType, str],
        rows: Sequence[Any],
        title: Optional[str] = None,
        date_range: Optional[str] = None
    ) -> bytes:
        """
        Serialize report rows as a landscape PDF.

        Args:
            report_type: Report type enum or tag
            rows: Report rows
            title: Title after the organization name (default per report type)
            date_range: Caption line under the title

        Raises:
            ReportValidationError: If the type is unknown
            ReportGenerationError: If the PDF cannot be produced
        """
        report_type = self._resolve_report_type(report_type)
        schema = REPORT_DEFINITIONS[report_type].schema
        options = {
            'title': title or schema.title,
            'date_range': date_range or "",
            'organization_name': self._settings.organization_name,
        }
        return self._render(FileFormat.PDF, schema, rows, options)

    def export(
        self,
        report_type: Union[ReportType, str],
        file_format: Union[FileFormat, str],
        from_date: Optional[date],
        to_date: Optional[date],
        agent_id: Optional[str] = None,
        status: Optional[str] = None
    ) -> ExportResult:
        """
        Aggregate and serialize one report.

        Returns:
            ExportResult with the bytes, '<type>-report.<ext>' filename
            and media type

        Raises:
            ReportValidationError: If the request is incomplete or unknown
            ReportGenerationError: If serialization fails
        """
        start_time = time.time()
        report_type = self._resolve_report_type(report_type)
        file_format = self._resolve_file_format(file_format)
        from_date, to_date = self._validate_dates(from_date, to_date)

        rows = self.build_report(report_type, from_date, to_date, agent_id, status)

        if file_format == FileFormat.XLSX:
            content = self.render_workbook(report_type, rows)
        else:
            content = self.render_document(
                report_type,
                rows,
                date_range=date_range_caption(from_date, to_date)
            )

        formatter = self._get_formatter(file_format)
        result = ExportResult(
            content=content,
            filename=export_filename(report_type, formatter),
            content_type=formatter.get_content_type(),
        )

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Report export completed: type={report_type.value}, "
            f"format={file_format.value}, rows={len(rows)}, "
            f"size={len(content)}, time={elapsed_ms}ms"
        )
        return result

    def _render(
        self,
        file_format: FileFormat,
        schema: ReportSchema,
        rows: Sequence[Any],
        options: Dict[str, Any]
    ) -> bytes:
        """Run a formatter, surfacing any failure as ReportGenerationError."""
        formatter = self._get_formatter(file_format)
        try:
            return formatter.format(schema, rows, options)
        except ValueError as e:
            raise ReportGenerationError(f"Report generation failed: {e}") from e

    @staticmethod
    def _get_formatter(file_format: FileFormat) -> BaseFormatter:
        try:
            return get_formatter(file_format)
        except ImportError as e:
            raise ReportGenerationError(
                f"Format not available: {file_format.value}. {e}"
            ) from e

    @staticmethod
    def _resolve_report_type(report_type: Union[ReportType, str, None]) -> ReportType:
        if report_type is None:
            raise ReportValidationError("Report type is required")
        try:
            return ReportType(report_type)
        except ValueError:
            supported = [rt.value for rt in ReportType]
            raise ReportValidationError(
                f"Unknown report type: '{report_type}'. "
                f"Supported types: {supported}"
            )

    @staticmethod
    def _resolve_file_format(file_format: Union[FileFormat, str, None]) -> FileFormat:
        if file_format is None:
            raise ReportValidationError("File format is required")
        try:
            return FileFormat(file_format)
        except ValueError:
            supported = [fmt.value for fmt in FileFormat]
            raise ReportValidationError(
                f"Unknown file format: '{file_format}'. "
                f"Supported formats: {supported}"
            )

    @staticmethod
    def _validate_dates(from_date: Any, to_date: Any) -> Tuple[date, date]:
        if from_date is None or to_date is None:
            raise ReportValidationError("from_date and to_date are required")
        try:
            if isinstance(from_date, str):
                from_date = date.fromisoformat(from_date)
            if isinstance(to_date, str):
                to_date = date.fromisoformat(to_date)
        except ValueError as e:
            raise ReportValidationError(f"Invalid date: {e}") from e
        if not isinstance(from_date, date) or not isinstance(to_date, date):
            raise ReportValidationError("from_date and to_date must be dates")
        return from_date, to_date
