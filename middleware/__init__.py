"""Middleware for the reports API."""

from .rate_limiter import (
    limiter,
    setup_rate_limiting,
    limit_health,
    limit_export,
    limit_pdf_export,
    RATE_LIMITS,
)

__all__ = [
    "limiter",
    "setup_rate_limiting",
    "limit_health",
    "limit_export",
    "limit_pdf_export",
    "RATE_LIMITS",
]
