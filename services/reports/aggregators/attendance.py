"""
Attendance and visit aggregator.

Projects check-in records onto local wall-clock time and computes the
worked duration for records that have been checked out.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from models.reports import AttendanceRecord, AttendanceReportRow, ReportType
from .base import BaseAggregator

logger = logging.getLogger(__name__)


def duration_minutes(check_in: datetime, check_out: Optional[datetime]) -> Optional[int]:
    """Whole minutes from check_in to check_out, truncated toward zero; None while checked in."""
    if check_out is None:
        return None
    return int((check_out - check_in) / timedelta(minutes=1))


class AttendanceAggregator(BaseAggregator):
    """
    Aggregator for the attendance report type.

    Windows records on check_in_time; records without a check-in are skipped.
    """

    def get_report_type(self) -> ReportType:
        """Return the report type this aggregator handles."""
        return ReportType.ATTENDANCE

    def aggregate(
        self,
        from_date: date,
        to_date: date,
        filter_value: Optional[str] = None
    ) -> List[AttendanceReportRow]:
        """
        Build attendance report rows.

        Args:
            from_date: First day of the window
            to_date: Last day of the window (inclusive)
            filter_value: Optional agent id (exact match)

        Returns:
            Rows ordered by check-in time
        """
        self.validate_params(from_date, to_date)
        agent_id = filter_value

        logger.info(
            f"Aggregating attendance report: from={from_date}, to={to_date}, "
            f"agent_id={agent_id}"
        )

        start, end = self.window(from_date, to_date)
        records = [
            record for record in self._source.get_all_attendance()
            if self.in_window(record.check_in_time, start, end)
            and (self.is_blank(agent_id) or agent_id == record.agent_id)
        ]
        records.sort(key=lambda record: self._as_aware(record.check_in_time))

        rows = [self._to_row(record) for record in records]

        logger.info(f"Aggregated attendance report: {len(rows)} rows")
        return rows

    def _to_row(self, record: AttendanceRecord) -> AttendanceReportRow:
        check_in = self.to_local(record.check_in_time)
        check_out = (
            self.to_local(record.check_out_time)
            if record.check_out_time is not None else None
        )
        return AttendanceReportRow(
            agent_id=record.agent_id,
            agent_name=record.agent_name,
            date=check_in.date(),
            check_in_time=check_in,
            check_out_time=check_out,
            total_duration_minutes=duration_minutes(check_in, check_out),
            status=record.status,
        )
