"""
Sales performance aggregator.

Joins invoices with their line items: one row per (invoice, line item)
pair, or a single row with no product when an invoice has no line items.
"""

import json
import logging
from datetime import date
from typing import List, Optional

from models.reports import Invoice, InvoiceLineItem, ReportType, SalesReportRow
from .base import BaseAggregator

logger = logging.getLogger(__name__)


def extract_customer_name(snapshot_json: Optional[str]) -> Optional[str]:
    """
    Read the customer name from an invoice's customer snapshot.

    The snapshot is parsed as JSON and its top-level ``name`` field is
    returned. Anything else (no snapshot, invalid JSON, a non-object
    document, a missing or non-string name) yields None.
    """
    if not snapshot_json:
        return None
    try:
        snapshot = json.loads(snapshot_json)
    except (json.JSONDecodeError, TypeError) as e:
        logger.debug(f"Unparseable customer snapshot: {e}")
        return None
    if not isinstance(snapshot, dict):
        return None
    name = snapshot.get("name")
    return name if isinstance(name, str) else None


class SalesAggregator(BaseAggregator):
    """
    Aggregator for the sales report type.

    Windows invoices on created_at and filters them by agent id.
    """

    def get_report_type(self) -> ReportType:
        """Return the report type this aggregator handles."""
        return ReportType.SALES

    def aggregate(
        self,
        from_date: date,
        to_date: date,
        filter_value: Optional[str] = None
    ) -> List[SalesReportRow]:
        """
        Build sales report rows.

        Args:
            from_date: First day of the window
            to_date: Last day of the window (inclusive)
            filter_value: Optional agent id (exact match)

        Returns:
            Rows ordered by invoice created_at; line items of one invoice
            are contiguous and keep their stored order
        """
        self.validate_params(from_date, to_date)
        agent_id = filter_value

        logger.info(
            f"Aggregating sales report: from={from_date}, to={to_date}, "
            f"agent_id={agent_id}"
        )

        start, end = self.window(from_date, to_date)
        invoices = [
            invoice for invoice in self._source.get_all_invoices()
            if self.in_window(invoice.created_at, start, end)
            and (self.is_blank(agent_id) or agent_id == invoice.agent_id)
        ]
        invoices.sort(key=lambda invoice: self._as_aware(invoice.created_at))

        rows: List[SalesReportRow] = []
        for invoice in invoices:
            items = self._source.get_line_items(invoice.id)
            if not items:
                rows.append(self._to_row(invoice, None))
                continue
            rows.extend(self._to_row(invoice, item) for item in items)

        logger.info(f"Aggregated sales report: {len(invoices)} invoices, {len(rows)} rows")
        return rows

    def _to_row(self, invoice: Invoice, item: Optional[InvoiceLineItem]) -> SalesReportRow:
        return SalesReportRow(
            invoice_id=invoice.id,
            invoice_no=invoice.invoice_no,
            agent_id=invoice.agent_id,
            agent_name=invoice.agent_name,
            customer_name=extract_customer_name(invoice.customer_snapshot_json),
            product_name=item.name if item is not None else None,
            total=invoice.total,
            status=invoice.status,
            invoice_date=self.local_date(invoice.invoice_date),
        )
