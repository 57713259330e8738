"""
Pytest configuration and fixtures for report tests.

Provides an in-memory record source with a small field-force dataset, UTC
report settings, and a ReportService wired to both. No database is needed.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from pytz import UTC

from models.reports import AttendanceRecord, Invoice, InvoiceLineItem, SalesOrder
from middleware.rate_limiter import limiter
from services.reports import InMemoryRecordSource, ReportService, ReportSettings
from services.reports.formatters.pdf_formatter import WEASYPRINT_AVAILABLE

requires_weasyprint = pytest.mark.skipif(
    not WEASYPRINT_AVAILABLE,
    reason="weasyprint (or its native libraries) not installed"
)


def utc(*args) -> datetime:
    """Build a timezone-aware UTC datetime."""
    return datetime(*args, tzinfo=UTC)


@pytest.fixture
def settings():
    """Report settings pinned to UTC so day boundaries are predictable."""
    return ReportSettings(timezone="UTC", organization_name="Candor Water Tech")


@pytest.fixture
def invoices():
    """
    Three invoices.

    inv-1: 2024-01-01, no line items
    inv-2: 2024-01-05, two line items, no agent name, snapshot without a name
    inv-3: created exactly at 2024-01-06 00:00 UTC (outside a window ending 2024-01-05)
    """
    return [
        Invoice(
            id="inv-1",
            invoice_no="INV-0001",
            agent_id="agent-1",
            agent_name="Alice Mwangi",
            customer_snapshot_json='{"id": "c-9", "name": "Acme Ltd", "phone": "0700"}',
            total=Decimal("150.50"),
            status="PAID",
            invoice_date=utc(2024, 1, 1, 10, 0),
            created_at=utc(2024, 1, 1, 10, 0),
        ),
        Invoice(
            id="inv-2",
            invoice_no="INV-0002",
            agent_id="agent-2",
            agent_name=None,
            customer_snapshot_json='{"phone": "0711"}',
            total=Decimal("99.99"),
            status="DRAFT",
            invoice_date=utc(2024, 1, 5, 15, 0),
            created_at=utc(2024, 1, 5, 15, 0),
        ),
        Invoice(
            id="inv-3",
            invoice_no="INV-0003",
            agent_id="agent-1",
            agent_name="Alice Mwangi",
            customer_snapshot_json='{"name": "Late Customer"}',
            total=Decimal("10"),
            status="PAID",
            invoice_date=utc(2024, 1, 6, 0, 0),
            created_at=utc(2024, 1, 6, 0, 0),
        ),
    ]


@pytest.fixture
def line_items():
    return [
        InvoiceLineItem(id="li-1", invoice_id="inv-2", name="Water Filter"),
        InvoiceLineItem(id="li-2", invoice_id="inv-2", name="Service Plan"),
        InvoiceLineItem(id="li-3", invoice_id="inv-3", name="Pump"),
    ]


@pytest.fixture
def attendance():
    return [
        AttendanceRecord(
            id="att-1",
            agent_id="agent-1",
            agent_name="Alice Mwangi",
            check_in_time=utc(2024, 1, 2, 9, 0),
            check_out_time=utc(2024, 1, 2, 17, 30),
            status="PRESENT",
        ),
        AttendanceRecord(
            id="att-2",
            agent_id="agent-2",
            agent_name="Brian Otieno",
            check_in_time=utc(2024, 1, 3, 8, 15),
            check_out_time=None,
            status="CHECKED_IN",
        ),
        AttendanceRecord(
            id="att-3",
            agent_id="agent-1",
            agent_name="Alice Mwangi",
            check_in_time=None,
            status="UNKNOWN",
        ),
        AttendanceRecord(
            id="att-4",
            agent_id="agent-1",
            agent_name="Alice Mwangi",
            check_in_time=utc(2024, 2, 1, 9, 0),
            check_out_time=utc(2024, 2, 1, 12, 0),
            status="PRESENT",
        ),
    ]


@pytest.fixture
def sales_orders():
    return [
        SalesOrder(
            id="o-1", order_number="SO-001", customer_name="Acme Ltd",
            amount=Decimal("1200.00"), status="pending", created_at=utc(2024, 1, 2, 11, 0),
        ),
        SalesOrder(
            id="o-2", order_number="SO-002", customer_name="Beta Farms",
            amount=Decimal("300"), status="Closed", created_at=utc(2024, 1, 3, 9, 30),
        ),
        SalesOrder(
            id="o-3", order_number="SO-003", customer_name="Gamma Hotel",
            amount=None, status="PENDING", created_at=utc(2024, 1, 4, 16, 45),
        ),
        SalesOrder(
            id="o-4", order_number="SO-004", customer_name="No Timestamp",
            amount=Decimal("5"), status="pending", created_at=None,
        ),
        SalesOrder(
            id="o-5", order_number="SO-005", customer_name="Later Co",
            amount=Decimal("75"), status="Pending", created_at=utc(2024, 3, 1, 8, 0),
        ),
    ]


@pytest.fixture
def source(invoices, line_items, attendance, sales_orders):
    """In-memory record source holding the sample dataset."""
    return InMemoryRecordSource(
        invoices=invoices,
        line_items=line_items,
        attendance=attendance,
        sales_orders=sales_orders,
    )


@pytest.fixture
def service(source, settings):
    """ReportService over the sample dataset."""
    return ReportService(source, settings)


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Keep slowapi limits from leaking between API tests."""
    limiter.enabled = False
    yield
    limiter.enabled = True
