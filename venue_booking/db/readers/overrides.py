from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection

from venue_booking.domain.models import DailyOverride
from venue_booking.models.daily_overrides import DailyOverrideRow


def get_overrides(
    conn: Connection, listing_id: UUID, start_date: date, end_date: date
) -> dict[date, DailyOverride]:
    """
    Fetch calendar overrides of a listing for dates in [start_date, end_date].

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (UUID): Listing ID.
        start_date (date): First date (inclusive).
        end_date (date): Last date (inclusive).

    Returns:
        dict[date, DailyOverride]: Overrides keyed by date.
    """
    rows = (
        conn.execute(
            select(DailyOverrideRow).where(
                DailyOverrideRow.listing_id == listing_id,
                DailyOverrideRow.date >= start_date,
                DailyOverrideRow.date <= end_date,
            )
        )
        .mappings()
        .fetchall()
    )
    return {
        row["date"]: DailyOverride(
            listing_id=row["listing_id"],
            date=row["date"],
            price=row["price"],
            hourly_price=row["hourly_price"],
            is_available=row["is_available"],
            note=row["note"],
        )
        for row in rows
    }
