"""
Record source interface for report aggregation.

The aggregators read four independent, full-snapshot collections. Each read
returns the collection as it exists at call time; no isolation is assumed
between reads of different collections.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from models.reports import AttendanceRecord, Invoice, InvoiceLineItem, SalesOrder

logger = logging.getLogger(__name__)


class RecordSource(ABC):
    """
    Abstract read-only provider of the report source collections.

    Implementations: PostgresRecordSource (db.record_repository) for
    production, InMemoryRecordSource for tests and previews.
    """

    @abstractmethod
    def get_all_invoices(self) -> List[Invoice]:
        """Return every invoice currently stored."""
        pass

    @abstractmethod
    def get_line_items(self, invoice_id: str) -> List[InvoiceLineItem]:
        """Return the line items of one invoice, in stored order."""
        pass

    @abstractmethod
    def get_all_attendance(self) -> List[AttendanceRecord]:
        """Return every attendance record currently stored."""
        pass

    @abstractmethod
    def get_all_sales_orders(self) -> List[SalesOrder]:
        """Return every sales order currently stored."""
        pass


class InMemoryRecordSource(RecordSource):
    """Record source backed by plain lists."""

    def __init__(
        self,
        invoices: Optional[Iterable[Invoice]] = None,
        line_items: Optional[Iterable[InvoiceLineItem]] = None,
        attendance: Optional[Iterable[AttendanceRecord]] = None,
        sales_orders: Optional[Iterable[SalesOrder]] = None,
    ):
        self._invoices = list(invoices or [])
        self._attendance = list(attendance or [])
        self._sales_orders = list(sales_orders or [])
        self._line_items: Dict[str, List[InvoiceLineItem]] = defaultdict(list)
        for item in line_items or []:
            self._line_items[item.invoice_id].append(item)

    def get_all_invoices(self) -> List[Invoice]:
        return list(self._invoices)

    def get_line_items(self, invoice_id: str) -> List[InvoiceLineItem]:
        return list(self._line_items.get(invoice_id, []))

    def get_all_attendance(self) -> List[AttendanceRecord]:
        return list(self._attendance)

    def get_all_sales_orders(self) -> List[SalesOrder]:
        return list(self._sales_orders)
