"""
Pydantic models for the report aggregation and export system.

This module defines the read-only source entities supplied by the record
sources, the normalized report rows produced by the aggregators, and the
request/response models for the reports API.

Database Reference: tables invoices, invoice_items, attendance_records, sales_orders
"""

from enum import Enum
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


# =============================================================================
# ENUMS
# =============================================================================

class ReportType(str, Enum):
    """Report types exposed by the export engine."""
    SALES = "sales"
    ATTENDANCE = "attendance"
    ORDERS = "orders"

    @classmethod
    def _missing_(cls, value):
        # Accept the upper-case tags used by existing clients ("SALES")
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        return None


class FileFormat(str, Enum):
    """Supported export file formats."""
    XLSX = "xlsx"
    PDF = "pdf"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "excel":
                return cls.XLSX
            for member in cls:
                if member.value == lowered:
                    return member
        return None


# =============================================================================
# SOURCE ENTITIES (read-only snapshots from the record sources)
# =============================================================================

class Invoice(BaseModel):
    """Invoice issued by a field agent. Owned by the billing subsystem."""

    id: str
    invoice_no: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    customer_snapshot_json: Optional[str] = Field(
        None,
        description="Raw JSON snapshot of the customer at invoicing time"
    )
    total: Optional[Decimal] = None
    status: Optional[str] = None
    invoice_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class InvoiceLineItem(BaseModel):
    """A single product line on an invoice."""

    id: Optional[str] = None
    invoice_id: str
    name: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None


class AttendanceRecord(BaseModel):
    """A field agent's check-in (and optional check-out)."""

    id: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: Optional[str] = None
    work_type: Optional[str] = None
    reason: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class SalesOrder(BaseModel):
    """A sales order in the pipeline."""

    id: str
    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    amount: Optional[Decimal] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# REPORT ROWS (derived, never persisted)
# =============================================================================

class SalesReportRow(BaseModel):
    """One (invoice, line item) pair, or one invoice without line items."""

    invoice_id: str
    invoice_no: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    customer_name: Optional[str] = None
    product_name: Optional[str] = None
    total: Optional[Decimal] = None
    status: Optional[str] = None
    invoice_date: Optional[date] = None


class AttendanceReportRow(BaseModel):
    """One attendance record projected onto local wall-clock time."""

    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    total_duration_minutes: Optional[int] = Field(
        None,
        description="Whole minutes between check-in and check-out; null while checked in"
    )
    status: Optional[str] = None


class OrdersReportRow(BaseModel):
    """One sales order in the reporting window."""

    order_id: str
    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    amount: Optional[Decimal] = None
    status: Optional[str] = None
    created_date: date


# =============================================================================
# REQUEST MODELS
# =============================================================================

class _DateRangeRequest(BaseModel):
    """Shared date range; accepts both snake_case and camelCase field names."""

    from_date: Optional[date] = Field(None, alias="fromDate", description="First day (inclusive)")
    to_date: Optional[date] = Field(None, alias="toDate", description="Last day (inclusive)")

    model_config = ConfigDict(populate_by_name=True)


class SalesReportRequest(_DateRangeRequest):
    """Request for the sales performance report."""

    agent_id: Optional[str] = Field(None, alias="agentId", description="Optional agent filter")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "from_date": "2024-01-01",
                "to_date": "2024-01-31",
                "agent_id": "agent-17"
            }
        }
    )


class AttendanceReportRequest(_DateRangeRequest):
    """Request for the attendance and visit report."""

    agent_id: Optional[str] = Field(None, alias="agentId", description="Optional agent filter")


class OrdersReportRequest(_DateRangeRequest):
    """Request for the orders / pipeline report."""

    status: Optional[str] = Field(None, description="Optional case-insensitive status filter")


class ExportRequest(_DateRangeRequest):
    """Request to export a report as a workbook or PDF."""

    type: Optional[str] = Field(None, description="Report type: sales, attendance or orders")
    agent_id: Optional[str] = Field(None, alias="agentId")
    status: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "type": "SALES",
                "from_date": "2024-01-01",
                "to_date": "2024-01-31"
            }
        }
    )


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class ReportTypesResponse(BaseModel):
    """Available report types and export formats."""

    success: bool = True
    report_types: List[str]
    file_formats: List[str]
