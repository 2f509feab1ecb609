"""
SQLAlchemy engine singleton with production-ready connection pooling.

This module creates a single engine instance shared by every store. Booking
requests are short transactions, so the pool is sized for many concurrent
requests rather than long-held connections.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from venue_booking.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,  # Detect connections dropped by the server
    pool_recycle=3600,
    echo=False,
)


def check_engine_health() -> bool:
    """
    Check if database engine is healthy and connections are working.

    Used by the /ready endpoint to verify database connectivity before
    allowing traffic to the service.

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
