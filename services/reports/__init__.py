"""
Report aggregation and export services.

This package provides the report pipeline including:
- Record source interface and in-memory source
- Aggregators for each report type (sales, attendance, orders)
- Column schemas shared by every export format
- Output formatters for XLSX and PDF
- Report service orchestrator
"""

from .config import ReportSettings

from .sources import RecordSource, InMemoryRecordSource

from .aggregators import (
    BaseAggregator,
    SalesAggregator,
    AttendanceAggregator,
    OrdersAggregator,
)

from .schemas import (
    ColumnSpec,
    ReportSchema,
    SALES_SCHEMA,
    ATTENDANCE_SCHEMA,
    ORDERS_SCHEMA,
)

from .formatters import (
    BaseFormatter,
    get_formatter,
    get_formatter_by_name,
    is_format_available,
)

from .generator import (
    ReportService,
    ReportValidationError,
    ReportGenerationError,
    ExportResult,
    date_range_caption,
)

__all__ = [
    # Configuration
    'ReportSettings',
    # Sources
    'RecordSource',
    'InMemoryRecordSource',
    # Aggregators
    'BaseAggregator',
    'SalesAggregator',
    'AttendanceAggregator',
    'OrdersAggregator',
    # Schemas
    'ColumnSpec',
    'ReportSchema',
    'SALES_SCHEMA',
    'ATTENDANCE_SCHEMA',
    'ORDERS_SCHEMA',
    # Formatters
    'BaseFormatter',
    'get_formatter',
    'get_formatter_by_name',
    'is_format_available',
    # Service
    'ReportService',
    'ReportValidationError',
    'ReportGenerationError',
    'ExportResult',
    'date_range_caption',
]
