"""
Shared cell formatting helpers.

Used by the report column schemas so the workbook and PDF exports render
text and numbers the same way.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Any


def format_cell_text(value: Any) -> str:
    """Format a text cell; None becomes the empty string, dates become ISO text."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def format_plain_decimal(value: Any) -> str:
    """Format a number as plain decimal text (no exponent, no separators); None is 0."""
    if value is None:
        return "0"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def to_excel_number(value: Any) -> Any:
    """Convert a number for a typed spreadsheet cell; None is 0."""
    if value is None:
        return 0
    if isinstance(value, Decimal):
        return float(value)
    return value
