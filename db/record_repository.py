"""
PostgreSQL record source for report aggregation.

Full-snapshot reads of the invoices, invoice_items, attendance_records and
sales_orders tables. Each method is an independent read; no transaction
spans two collections.
"""

import logging
from typing import List

from models.reports import AttendanceRecord, Invoice, InvoiceLineItem, SalesOrder
from services.reports.sources import RecordSource
from .database import get_db_connection

logger = logging.getLogger(__name__)


class PostgresRecordSource(RecordSource):
    """
    Record source backed by the field-force PostgreSQL schema.

    Rows are returned by RealDictCursor and validated into the pydantic
    source entities. Key columns are cast to text so integer and UUID keys
    both map onto the string ids of the entities.
    """

    def get_all_invoices(self) -> List[Invoice]:
        """
        Read every invoice.

        Raises:
            psycopg2.Error: If database operation fails
        """
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    SELECT
                        id::text AS id, invoice_no, agent_id::text AS agent_id, agent_name,
                        customer_snapshot_json::text AS customer_snapshot_json, total, status,
                        invoice_date, created_at
                    FROM invoices
                    """
                )
                rows = cursor.fetchall()

        logger.debug(f"Read {len(rows)} invoices")
        return [Invoice(**dict(row)) for row in rows]

    def get_line_items(self, invoice_id: str) -> List[InvoiceLineItem]:
        """
        Read the line items of one invoice.

        Raises:
            psycopg2.Error: If database operation fails
        """
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    SELECT id::text AS id, invoice_id::text AS invoice_id, name, quantity, unit_price
                    FROM invoice_items
                    WHERE invoice_id::text = %s
                    ORDER BY id
                    """,
                    (invoice_id,)
                )
                rows = cursor.fetchall()

        return [InvoiceLineItem(**dict(row)) for row in rows]

    def get_all_attendance(self) -> List[AttendanceRecord]:
        """
        Read every attendance record.

        Raises:
            psycopg2.Error: If database operation fails
        """
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    SELECT
                        id::text AS id, agent_id::text AS agent_id, agent_name, check_in_time,
                        check_out_time, status, work_type, reason,
                        latitude, longitude
                    FROM attendance_records
                    """
                )
                rows = cursor.fetchall()

        logger.debug(f"Read {len(rows)} attendance records")
        return [AttendanceRecord(**dict(row)) for row in rows]

    def get_all_sales_orders(self) -> List[SalesOrder]:
        """
        Read every sales order.

        Raises:
            psycopg2.Error: If database operation fails
        """
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    SELECT
                        id::text AS id, order_number, customer_name, amount,
                        status, created_at
                    FROM sales_orders
                    """
                )
                rows = cursor.fetchall()

        logger.debug(f"Read {len(rows)} sales orders")
        return [SalesOrder(**dict(row)) for row in rows]
