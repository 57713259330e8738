"""
Database module for the report record sources.

This module provides the database access layer for:
- Pooled PostgreSQL connections
- Snapshot reads of invoices, invoice items, attendance records and sales orders
"""

from .database import (
    get_db_connection,
    init_connection_pool,
    close_connection_pool,
    is_pool_initialized,
    health_check,
)
from .record_repository import PostgresRecordSource

__all__ = [
    'get_db_connection',
    'init_connection_pool',
    'close_connection_pool',
    'is_pool_initialized',
    'health_check',
    'PostgresRecordSource',
]
