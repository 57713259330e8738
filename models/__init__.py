"""
Pydantic models for the field-force reporting system.

This module exports the source entities, report rows, and API models
used by the report aggregation and export engine.
"""

from .reports import (
    # Enums
    ReportType,
    FileFormat,
    # Source entities
    Invoice,
    InvoiceLineItem,
    AttendanceRecord,
    SalesOrder,
    # Report rows
    SalesReportRow,
    AttendanceReportRow,
    OrdersReportRow,
    # Request models
    SalesReportRequest,
    AttendanceReportRequest,
    OrdersReportRequest,
    ExportRequest,
    # Response models
    ReportTypesResponse,
)

__all__ = [
    'ReportType',
    'FileFormat',
    'Invoice',
    'InvoiceLineItem',
    'AttendanceRecord',
    'SalesOrder',
    'SalesReportRow',
    'AttendanceReportRow',
    'OrdersReportRow',
    'SalesReportRequest',
    'AttendanceReportRequest',
    'OrdersReportRequest',
    'ExportRequest',
    'ReportTypesResponse',
]
