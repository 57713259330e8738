"""
Column schemas for exported reports.

A schema is the ordered list of (label, extractor) pairs that defines the
columns of one report type. Both the workbook and the PDF renderer consume
the same schema, so the two exports always agree on headers and order.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

from utils.formatting import format_cell_text, format_plain_decimal, to_excel_number


@dataclass(frozen=True)
class ColumnSpec:
    """One exported column: header label, cell extractor, and cell kind."""

    label: str
    extractor: Callable[[Any], Any]
    numeric: bool = False

    def workbook_value(self, row: Any) -> Any:
        """Typed cell value: numbers for numeric columns, text otherwise."""
        value = self.extractor(row)
        if self.numeric:
            return to_excel_number(value)
        return format_cell_text(value)

    def document_value(self, row: Any) -> str:
        """Cell text for page documents; numbers as plain decimal text."""
        value = self.extractor(row)
        if self.numeric:
            return format_plain_decimal(value)
        return format_cell_text(value)


@dataclass(frozen=True)
class ReportSchema:
    """Fixed export layout of one report type."""

    sheet_name: str
    title: str
    columns: List[ColumnSpec]

    @property
    def labels(self) -> List[str]:
        return [column.label for column in self.columns]


def agent_label(row: Any) -> Any:
    """Agent name, falling back to the agent id."""
    return row.agent_name if row.agent_name is not None else row.agent_id


SALES_SCHEMA = ReportSchema(
    sheet_name="Sales",
    title="Sales Performance Report",
    columns=[
        ColumnSpec("Invoice No", lambda row: row.invoice_no),
        ColumnSpec("Agent", agent_label),
        ColumnSpec("Customer", lambda row: row.customer_name),
        ColumnSpec("Product", lambda row: row.product_name),
        ColumnSpec("Total", lambda row: row.total, numeric=True),
        ColumnSpec("Status", lambda row: row.status),
        ColumnSpec("Invoice Date", lambda row: row.invoice_date),
    ],
)

ATTENDANCE_SCHEMA = ReportSchema(
    sheet_name="Attendance",
    title="Attendance & Visit Report",
    columns=[
        ColumnSpec("Agent", agent_label),
        ColumnSpec("Date", lambda row: row.date),
        ColumnSpec("Check-in", lambda row: row.check_in_time),
        ColumnSpec("Check-out", lambda row: row.check_out_time),
        ColumnSpec("Duration (min)", lambda row: row.total_duration_minutes, numeric=True),
        ColumnSpec("Status", lambda row: row.status),
    ],
)

ORDERS_SCHEMA = ReportSchema(
    sheet_name="Orders",
    title="Orders / Pipeline Report",
    columns=[
        ColumnSpec("Order No", lambda row: row.order_number),
        ColumnSpec("Customer", lambda row: row.customer_name),
        ColumnSpec("Amount", lambda row: row.amount, numeric=True),
        ColumnSpec("Status", lambda row: row.status),
        ColumnSpec("Created", lambda row: row.created_date),
    ],
)
