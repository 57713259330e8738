"""
Unit tests for the report aggregators.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import utc
from models.reports import AttendanceRecord, Invoice, InvoiceLineItem, SalesOrder
from services.reports import (
    AttendanceAggregator,
    InMemoryRecordSource,
    OrdersAggregator,
    ReportSettings,
    SalesAggregator,
)
from services.reports.aggregators import duration_minutes, extract_customer_name


# Sales

def test_sales_fan_out_scenario(source, settings):
    """Invoice without items gives one row, invoice with two items gives two."""
    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 5))

    assert len(rows) == 3
    assert [row.invoice_id for row in rows] == ["inv-1", "inv-2", "inv-2"]
    assert rows[0].product_name is None
    assert [row.product_name for row in rows[1:]] == ["Water Filter", "Service Plan"]


def test_sales_row_count_matches_line_item_sum(source, settings, invoices, line_items):
    """Row count equals the sum of max(1, line item count) over windowed invoices."""
    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 31))

    expected = sum(
        max(1, len([item for item in line_items if item.invoice_id == invoice.id]))
        for invoice in invoices
    )
    assert len(rows) == expected == 4


def test_sales_window_boundaries(settings):
    """Start of `from` is included; start of the day after `to` is excluded."""
    source = InMemoryRecordSource(invoices=[
        Invoice(id="first", created_at=utc(2024, 1, 1, 0, 0), invoice_date=utc(2024, 1, 1)),
        Invoice(id="last", created_at=utc(2024, 1, 5, 23, 59, 59), invoice_date=utc(2024, 1, 5)),
        Invoice(id="after", created_at=utc(2024, 1, 6, 0, 0), invoice_date=utc(2024, 1, 6)),
        Invoice(id="before", created_at=utc(2023, 12, 31, 23, 59, 59), invoice_date=utc(2023, 12, 31)),
    ])

    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 5))

    assert [row.invoice_id for row in rows] == ["first", "last"]


def test_sales_agent_filter(source, settings):
    rows = SalesAggregator(source, settings).aggregate(
        date(2024, 1, 1), date(2024, 1, 31), "agent-1"
    )

    assert {row.agent_id for row in rows} == {"agent-1"}
    assert [row.invoice_id for row in rows] == ["inv-1", "inv-3"]


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_sales_blank_agent_filter_is_ignored(source, settings, blank):
    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 5), blank)

    assert len(rows) == 3


def test_sales_row_fields(source, settings):
    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 5))
    first = rows[0]

    assert first.invoice_no == "INV-0001"
    assert first.agent_name == "Alice Mwangi"
    assert first.customer_name == "Acme Ltd"
    assert first.total == Decimal("150.50")
    assert first.status == "PAID"
    assert first.invoice_date == date(2024, 1, 1)

    # Snapshot without a name field
    assert rows[1].customer_name is None


def test_sales_invoice_date_uses_local_zone():
    """An evening UTC timestamp falls on the next calendar day in Nairobi."""
    settings = ReportSettings(timezone="Africa/Nairobi")
    source = InMemoryRecordSource(invoices=[
        Invoice(
            id="inv-tz",
            created_at=utc(2024, 1, 1, 22, 30),
            invoice_date=utc(2024, 1, 1, 22, 30),
        ),
    ])

    # 22:30 UTC is 01:30 on 2024-01-02 in UTC+3
    assert SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 1)) == []
    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 2), date(2024, 1, 2))
    assert rows[0].invoice_date == date(2024, 1, 2)


def test_sales_naive_timestamps_are_utc(settings):
    source = InMemoryRecordSource(invoices=[
        Invoice(id="naive", created_at=datetime(2024, 1, 3, 12, 0), invoice_date=datetime(2024, 1, 3, 12, 0)),
    ])

    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 3), date(2024, 1, 3))

    assert len(rows) == 1
    assert rows[0].invoice_date == date(2024, 1, 3)


def test_sales_skips_invoices_without_created_at(settings):
    source = InMemoryRecordSource(invoices=[Invoice(id="no-ts", created_at=None)])

    assert SalesAggregator(source, settings).aggregate(date(2000, 1, 1), date(2100, 1, 1)) == []


def test_sales_line_items_stay_contiguous(settings):
    source = InMemoryRecordSource(
        invoices=[
            Invoice(id="b", created_at=utc(2024, 1, 2, 9), invoice_date=utc(2024, 1, 2)),
            Invoice(id="a", created_at=utc(2024, 1, 1, 9), invoice_date=utc(2024, 1, 1)),
        ],
        line_items=[
            InvoiceLineItem(invoice_id="a", name="a1"),
            InvoiceLineItem(invoice_id="b", name="b1"),
            InvoiceLineItem(invoice_id="a", name="a2"),
            InvoiceLineItem(invoice_id="b", name="b2"),
        ],
    )

    rows = SalesAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 2))

    assert [(row.invoice_id, row.product_name) for row in rows] == [
        ("a", "a1"), ("a", "a2"), ("b", "b1"), ("b", "b2"),
    ]


@pytest.mark.parametrize("snapshot, expected", [
    ('{"name": "Acme Ltd"}', "Acme Ltd"),
    ('{"id": 4, "name": "Jua Kali", "address": {"name": "Depot"}}', "Jua Kali"),
    ('{"phone": "0700"}', None),
    ('{"name": null}', None),
    ('{"name": 42}', None),
    ('["name", "Acme"]', None),
    ('{"name": "unterminated', None),
    ("", None),
    (None, None),
])
def test_extract_customer_name(snapshot, expected):
    assert extract_customer_name(snapshot) == expected


# Attendance

def test_attendance_duration_scenario(source, settings):
    """09:00 to 17:30 is 510 minutes."""
    rows = AttendanceAggregator(source, settings).aggregate(date(2024, 1, 2), date(2024, 1, 2))

    assert len(rows) == 1
    row = rows[0]
    assert row.total_duration_minutes == 510
    assert row.date == date(2024, 1, 2)
    assert row.check_in_time == datetime(2024, 1, 2, 9, 0)
    assert row.check_out_time == datetime(2024, 1, 2, 17, 30)
    assert row.status == "PRESENT"


def test_attendance_duration_present_iff_checked_out(source, settings):
    rows = AttendanceAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 31))

    assert len(rows) == 2
    for row in rows:
        assert (row.total_duration_minutes is None) == (row.check_out_time is None)
        if row.check_out_time is not None:
            elapsed = (row.check_out_time - row.check_in_time).total_seconds() // 60
            assert row.total_duration_minutes == elapsed


def test_attendance_skips_missing_check_in(source, settings):
    rows = AttendanceAggregator(source, settings).aggregate(date(2000, 1, 1), date(2100, 1, 1))

    assert "UNKNOWN" not in {row.status for row in rows}
    assert len(rows) == 3


def test_attendance_agent_filter(source, settings):
    rows = AttendanceAggregator(source, settings).aggregate(
        date(2024, 1, 1), date(2024, 1, 31), "agent-2"
    )

    assert [row.agent_name for row in rows] == ["Brian Otieno"]
    assert rows[0].total_duration_minutes is None


def test_attendance_local_wall_clock():
    """Check-in/out times are reported in the configured zone."""
    settings = ReportSettings(timezone="America/New_York")
    source = InMemoryRecordSource(attendance=[
        AttendanceRecord(
            agent_id="agent-9",
            check_in_time=utc(2024, 7, 1, 13, 0),
            check_out_time=utc(2024, 7, 1, 21, 15),
            status="PRESENT",
        ),
    ])

    rows = AttendanceAggregator(source, settings).aggregate(date(2024, 7, 1), date(2024, 7, 1))

    assert rows[0].check_in_time == datetime(2024, 7, 1, 9, 0)
    assert rows[0].check_out_time == datetime(2024, 7, 1, 17, 15)
    assert rows[0].total_duration_minutes == 495


def test_duration_minutes_truncates_partial_minutes():
    check_in = datetime(2024, 1, 1, 9, 0, 0)
    assert duration_minutes(check_in, datetime(2024, 1, 1, 9, 1, 59)) == 1
    assert duration_minutes(check_in, None) is None


# Orders

def test_orders_status_filter_is_case_insensitive(source, settings):
    rows = OrdersAggregator(source, settings).aggregate(
        date(2024, 1, 1), date(2024, 1, 31), "Pending"
    )

    assert [row.order_number for row in rows] == ["SO-001", "SO-003"]
    assert "Closed" not in {row.status for row in rows}


def test_orders_without_filter(source, settings):
    rows = OrdersAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 31))

    assert [row.order_id for row in rows] == ["o-1", "o-2", "o-3"]
    assert rows[0].created_date == date(2024, 1, 2)
    assert rows[0].amount == Decimal("1200.00")
    assert rows[2].amount is None


def test_orders_status_filter_does_not_match_missing_status(settings):
    source = InMemoryRecordSource(sales_orders=[
        SalesOrder(id="x", status=None, created_at=utc(2024, 1, 1, 12)),
    ])

    assert OrdersAggregator(source, settings).aggregate(date(2024, 1, 1), date(2024, 1, 1), "open") == []


# Shared behaviour

@pytest.mark.parametrize("aggregator_class", [SalesAggregator, AttendanceAggregator, OrdersAggregator])
def test_inverted_range_is_empty(source, settings, aggregator_class):
    """from > to yields no rows rather than an error."""
    rows = aggregator_class(source, settings).aggregate(date(2024, 1, 5), date(2024, 1, 1))

    assert rows == []


@pytest.mark.parametrize("aggregator_class", [SalesAggregator, AttendanceAggregator, OrdersAggregator])
def test_each_call_returns_fresh_rows(source, settings, aggregator_class):
    aggregator = aggregator_class(source, settings)

    first = aggregator.aggregate(date(2024, 1, 1), date(2024, 1, 31))
    second = aggregator.aggregate(date(2024, 1, 1), date(2024, 1, 31))

    assert first == second
    assert first is not second
    first.clear()
    assert len(aggregator.aggregate(date(2024, 1, 1), date(2024, 1, 31))) == len(second)


def test_missing_dates_raise(source, settings):
    with pytest.raises(ValueError):
        SalesAggregator(source, settings).aggregate(None, date(2024, 1, 1))


def test_unknown_timezone_rejected():
    with pytest.raises(ValueError, match="REPORT_TIMEZONE"):
        ReportSettings(timezone="Mars/Olympus_Mons")
