"""
Orders / pipeline aggregator.

Windows sales orders on created_at with an optional case-insensitive
status filter.
"""

import logging
from datetime import date
from typing import List, Optional

from models.reports import OrdersReportRow, ReportType, SalesOrder
from .base import BaseAggregator

logger = logging.getLogger(__name__)


class OrdersAggregator(BaseAggregator):
    """Aggregator for the orders report type."""

    def get_report_type(self) -> ReportType:
        """Return the report type this aggregator handles."""
        return ReportType.ORDERS

    def aggregate(
        self,
        from_date: date,
        to_date: date,
        filter_value: Optional[str] = None
    ) -> List[OrdersReportRow]:
        """
        Build orders report rows.

        Args:
            from_date: First day of the window
            to_date: Last day of the window (inclusive)
            filter_value: Optional order status, compared case-insensitively

        Returns:
            Rows ordered by order creation time
        """
        self.validate_params(from_date, to_date)
        status = filter_value

        logger.info(
            f"Aggregating orders report: from={from_date}, to={to_date}, "
            f"status={status}"
        )

        start, end = self.window(from_date, to_date)
        orders = [
            order for order in self._source.get_all_sales_orders()
            if self.in_window(order.created_at, start, end)
            and (self.is_blank(status) or self._status_matches(status, order.status))
        ]
        orders.sort(key=lambda order: self._as_aware(order.created_at))

        rows = [self._to_row(order) for order in orders]

        logger.info(f"Aggregated orders report: {len(rows)} rows")
        return rows

    @staticmethod
    def _status_matches(wanted: str, actual: Optional[str]) -> bool:
        return actual is not None and wanted.lower() == actual.lower()

    def _to_row(self, order: SalesOrder) -> OrdersReportRow:
        return OrdersReportRow(
            order_id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            amount=order.amount,
            status=order.status,
            created_date=self.local_date(order.created_at),
        )
