"""
Report aggregators package.

Provides one aggregator per report type. Each aggregator reads a snapshot
from a RecordSource and produces a fresh list of report rows. The mapping
from report type to aggregator lives in generator.REPORT_DEFINITIONS.
"""

from .base import BaseAggregator
from .sales import SalesAggregator, extract_customer_name
from .attendance import AttendanceAggregator, duration_minutes
from .orders import OrdersAggregator


__all__ = [
    'BaseAggregator',
    'SalesAggregator',
    'AttendanceAggregator',
    'OrdersAggregator',
    'extract_customer_name',
    'duration_minutes',
]
