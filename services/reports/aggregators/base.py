"""
Base aggregator interface for report row production.

Defines the abstract interface that all report type aggregators implement,
together with the shared date-window and local-time helpers.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

import pytz
from pydantic import BaseModel

from models.reports import ReportType
from ..config import ReportSettings
from ..sources import RecordSource

logger = logging.getLogger(__name__)


class BaseAggregator(ABC):
    """
    Abstract base class for report aggregators.

    Each report type (sales, attendance, orders) has a concrete
    implementation that reads a snapshot from the record source, keeps the
    records whose timestamp falls in the requested window, and projects them
    into report rows. Every call builds a fresh list; aggregators hold no
    state between calls.
    """

    def __init__(
        self,
        source: RecordSource,
        settings: Optional[ReportSettings] = None
    ):
        """
        Initialize the aggregator with its dependencies.

        Args:
            source: Read-only provider of the source collections
            settings: Report settings (time zone); loaded from env if omitted
        """
        self._source = source
        self._settings = settings or ReportSettings.from_env()

    @abstractmethod
    def get_report_type(self) -> ReportType:
        """
        Return the report type this aggregator handles.

        Returns:
            ReportType enum value
        """
        pass

    @abstractmethod
    def aggregate(
        self,
        from_date: date,
        to_date: date,
        filter_value: Optional[str] = None
    ) -> List[BaseModel]:
        """
        Produce report rows for the inclusive day range [from_date, to_date].

        Args:
            from_date: First local calendar day of the window
            to_date: Last local calendar day of the window (inclusive)
            filter_value: Optional secondary filter (agent id or status);
                None or blank disables it

        Returns:
            List of report rows; empty when from_date is after to_date
        """
        pass

    def validate_params(self, from_date: date, to_date: date) -> None:
        """
        Validate the date range parameters.

        Raises:
            ValueError: If either bound is missing or not a date
        """
        if from_date is None or to_date is None:
            raise ValueError("from_date and to_date are required")
        if not isinstance(from_date, date) or not isinstance(to_date, date):
            raise ValueError("from_date and to_date must be dates")

    def window(self, from_date: date, to_date: date) -> Tuple[datetime, datetime]:
        """
        Compute the half-open instant window [from 00:00 local, to+1 00:00 local).

        An inverted range gives start >= end, which matches nothing.
        """
        tz = self._settings.tzinfo
        start = tz.localize(datetime.combine(from_date, time.min))
        end = tz.localize(datetime.combine(to_date + timedelta(days=1), time.min))
        return start, end

    @staticmethod
    def in_window(value: Optional[datetime], start: datetime, end: datetime) -> bool:
        """Check whether a timestamp lies in [start, end). Missing timestamps never do."""
        if value is None:
            return False
        value = BaseAggregator._as_aware(value)
        return start <= value < end

    def to_local(self, value: datetime) -> datetime:
        """Convert a timestamp to naive local wall-clock time."""
        local = self._as_aware(value).astimezone(self._settings.tzinfo)
        return local.replace(tzinfo=None)

    def local_date(self, value: Optional[datetime]) -> Optional[date]:
        """Convert a timestamp to its local calendar date."""
        if value is None:
            return None
        return self.to_local(value).date()

    @staticmethod
    def is_blank(value: Optional[str]) -> bool:
        return value is None or not value.strip()

    @staticmethod
    def _as_aware(value: datetime) -> datetime:
        # Naive timestamps from a source are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=pytz.UTC)
        return value
