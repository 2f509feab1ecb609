from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection

from venue_booking.domain.enums import VenueStatus, VenueType
from venue_booking.domain.models import Venue
from venue_booking.models.venues import VenueRow


def get_venue(conn: Connection, listing_id: UUID) -> Optional[Venue]:
    """
    Fetch the venue snapshot for a listing.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (UUID): Listing ID.

    Returns:
        Optional[Venue]: Venue snapshot or None if the listing is unknown.
    """
    row = (
        conn.execute(select(VenueRow).where(VenueRow.id == listing_id)).mappings().fetchone()
    )
    if row is None:
        return None
    return Venue(
        id=row["id"],
        host_id=row["host_id"],
        type=VenueType(row["type"]),
        max_guest_count=row["max_guest_count"],
        base_price_per_hour=Decimal(row["base_price_per_hour"]),
        base_price_per_day=Decimal(row["base_price_per_day"]),
        currency=row["currency"],
        is_active=row["is_active"],
        status=VenueStatus(row["status"]),
    )
