"""
Rate limiting for the reports API.

Report reads share one per-client budget. Exports are counted separately
per client and per export route, with PDF rendering budgeted tighter than
workbooks because the layout engine is the slowest step of a request.
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

RATE_LIMITS = {
    "default": os.getenv("RATE_LIMIT_DEFAULT", "100/minute"),
    "export": os.getenv("RATE_LIMIT_EXPORT", "20/minute"),
    "export_pdf": os.getenv("RATE_LIMIT_EXPORT_PDF", "10/minute"),
    "health": os.getenv("RATE_LIMIT_HEALTH", "300/minute"),
}


def get_client_identifier(request: Request) -> str:
    """
    Identify the caller, preferring proxy headers over the socket address.

    X-Real-IP wins, then the first hop of X-Forwarded-For.
    """
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


def get_export_key(request: Request) -> str:
    """Client plus export route, so workbook and PDF budgets are independent."""
    return f"{get_client_identifier(request)}:{request.url.path}"


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[RATE_LIMITS["default"]],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer 429 with the same error envelope as the report endpoints."""
    logger.warning(
        f"Rate limit exceeded for {get_client_identifier(request)} on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "RateLimitExceeded",
            "message": "Too many report requests. Please try again later.",
            "detail": str(getattr(exc, "detail", "Rate limit exceeded")),
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter, its middleware and the 429 handler to the app."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    logger.info(
        f"Rate limiting configured: default={RATE_LIMITS['default']}, "
        f"export={RATE_LIMITS['export']}, export_pdf={RATE_LIMITS['export_pdf']}"
    )


def limit_health(func):
    return limiter.limit(RATE_LIMITS["health"])(func)


def limit_export(func):
    """Workbook export budget."""
    return limiter.limit(RATE_LIMITS["export"], key_func=get_export_key)(func)


def limit_pdf_export(func):
    """PDF export budget."""
    return limiter.limit(RATE_LIMITS["export_pdf"], key_func=get_export_key)(func)
