"""
Field-Force Reporting API - FastAPI Backend

Main entry point for the reporting backend that handles:
- Sales performance, attendance and orders reports
- Excel (XLSX) and PDF exports of those reports
"""

from dotenv import load_dotenv

# Load environment variables FIRST - before importing modules that need them
load_dotenv()

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict
import os
import logging

from api.reports import router as reports_router
from db.database import close_connection_pool, is_pool_initialized
from middleware.rate_limiter import setup_rate_limiting, limit_health

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: release pooled database connections
    close_connection_pool()
    logger.info("Database connection pool released")


app = FastAPI(
    title="Field-Force Reporting API",
    description="Report aggregation and XLSX/PDF export for field-force sales, attendance and orders",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Setup rate limiting (before other middleware)
setup_rate_limiting(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(reports_router)


@app.get("/health", response_model=Dict[str, str])
@limit_health
async def health(request: Request) -> Dict[str, str]:
    """
    Liveness probe.

    Reports whether the record-source pool is open without querying the
    database; the pool is created by the first report request.
    """
    return {
        "status": "healthy",
        "service": "field-force-reporting-backend",
        "version": "1.0.0",
        "database": "connected" if is_pool_initialized() else "idle",
    }


if __name__ == "__main__":
    import uvicorn

    # Run with: python main.py
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
