"""
Report Engine Configuration

Environment variables for the report aggregation and export engine.
"""

import os
from dataclasses import dataclass, field

import pytz


DEFAULT_ORGANIZATION_NAME = "Candor Water Tech"


@dataclass
class ReportSettings:
    """Configuration for report aggregation and rendering."""

    # IANA zone that defines "local" day boundaries and calendar dates
    timezone: str = field(default_factory=lambda: os.getenv("REPORT_TIMEZONE", "UTC"))

    # Prefix of the PDF title line
    organization_name: str = field(
        default_factory=lambda: os.getenv("REPORT_ORGANIZATION_NAME", DEFAULT_ORGANIZATION_NAME)
    )

    def __post_init__(self):
        try:
            self._tz = pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown REPORT_TIMEZONE: '{self.timezone}'") from e

    @property
    def tzinfo(self):
        """Resolved pytz zone for the configured timezone."""
        return self._tz

    @classmethod
    def from_env(cls) -> "ReportSettings":
        """Create settings from environment variables."""
        return cls()
