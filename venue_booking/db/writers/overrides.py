from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import structlog
from sqlalchemy.engine import Connection

from venue_booking.db.writers._upsert import upsert_with_distinct_check
from venue_booking.domain.models import DailyOverride
from venue_booking.models.daily_overrides import DailyOverrideRow

logger = structlog.get_logger(__name__)


def upsert_overrides(conn: Connection, overrides: list[DailyOverride]) -> int:
    """
    Upsert daily overrides keyed by (listing_id, date).

    Callers must pass at most one override per (listing_id, date); PostgreSQL
    refuses to update the same row twice in one statement.

    Args:
        conn (Connection): Active connection inside a transaction.
        overrides (list[DailyOverride]): Overrides to write.

    Returns:
        int: Number of rows inserted or changed.
    """
    now = datetime.now(timezone.utc)
    rows: list[dict[str, Any]] = [
        {
            "id": uuid4(),
            "listing_id": o.listing_id,
            "date": o.date,
            "price": o.price,
            "hourly_price": o.hourly_price,
            "is_available": o.is_available,
            "note": o.note,
            "created_at": now,
            "updated_at": now,
        }
        for o in overrides
    ]

    if not rows:
        logger.info("daily_overrides_upsert_empty")
        return 0

    written = upsert_with_distinct_check(
        conn=conn,
        table=DailyOverrideRow,
        rows=rows,
        conflict_columns=["listing_id", "date"],
        distinct_columns=["price", "hourly_price", "is_available", "note"],
    )
    logger.info("daily_overrides_upserted", submitted=len(rows), written=written)
    return written
