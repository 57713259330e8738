"""
PostgreSQL connection pool for the report record sources.

Report reads are full-table snapshots, so connections are handed out in
read-only sessions and every checkout ends with a rollback rather than a
commit. Uses psycopg2's ThreadedConnectionPool; rows come back as dicts.
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.ThreadedConnectionPool] = None
# First report requests may arrive together on threadpool workers
_pool_lock = threading.Lock()


def init_connection_pool(
    min_connections: Optional[int] = None,
    max_connections: Optional[int] = None,
    database_url: Optional[str] = None
) -> None:
    """
    Create the process-wide connection pool.

    Args:
        min_connections: Connections kept open (default DATABASE_POOL_MIN or 1)
        max_connections: Upper bound on open connections (default DATABASE_POOL_MAX or 5)
        database_url: PostgreSQL DSN (defaults to DATABASE_URL)

    Raises:
        ValueError: If no DSN is configured
        psycopg2.Error: If the pool cannot connect
    """
    global _connection_pool

    db_url = database_url or os.getenv("DATABASE_URL")
    if not db_url:
        raise ValueError(
            "DATABASE_URL not found. Set it in .env file or pass as parameter."
        )

    minconn = min_connections or int(os.getenv("DATABASE_POOL_MIN", "1"))
    maxconn = max_connections or int(os.getenv("DATABASE_POOL_MAX", "5"))

    with _pool_lock:
        if _connection_pool is not None:
            logger.debug("Connection pool already initialized")
            return
        try:
            _connection_pool = pool.ThreadedConnectionPool(
                minconn,
                maxconn,
                db_url,
                sslmode=os.getenv("DATABASE_SSLMODE", "prefer"),
                connect_timeout=10,
                keepalives=1,
                keepalives_idle=30,
                cursor_factory=RealDictCursor,
                # Large snapshot reads still have to finish
                options="-c statement_timeout=60000",
            )
        except psycopg2.Error as e:
            logger.error(f"Failed to create connection pool: {e}")
            raise

    logger.info(f"Database connection pool initialized: min={minconn}, max={maxconn}")


def close_connection_pool() -> None:
    """Close every pooled connection. Safe to call when no pool exists."""
    global _connection_pool

    with _pool_lock:
        if _connection_pool is None:
            return
        _connection_pool.closeall()
        _connection_pool = None
    logger.info("Database connection pool closed")


def is_pool_initialized() -> bool:
    return _connection_pool is not None


@contextmanager
def get_db_connection():
    """
    Borrow a pooled connection in a read-only session.

    Usage:
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute("SELECT * FROM invoices")
                rows = cursor.fetchall()

    Raises:
        RuntimeError: If the pool has not been initialized
        psycopg2.Error: If the read fails
    """
    if _connection_pool is None:
        raise RuntimeError(
            "Connection pool not initialized. Call init_connection_pool() first."
        )

    conn = _connection_pool.getconn()
    try:
        if conn.closed:
            logger.warning("Stale connection detected, getting fresh connection")
            _connection_pool.putconn(conn, close=True)
            conn = _connection_pool.getconn()
        conn.set_session(readonly=True)
        yield conn
    except psycopg2.Error as e:
        logger.error(f"Database read failed: {e}")
        raise
    finally:
        if not conn.closed:
            conn.rollback()
        _connection_pool.putconn(conn)


def health_check() -> bool:
    """Return True when a pooled connection can run a trivial query."""
    try:
        with get_db_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                return cursor.fetchone() is not None
    except (psycopg2.Error, RuntimeError) as e:
        logger.error(f"Database health check failed: {e}")
        return False
