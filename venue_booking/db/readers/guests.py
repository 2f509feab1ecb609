from typing import Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Connection

from venue_booking.config import SCHEMA


def get_guest_id_by_phone(conn: Connection, phone: str) -> Optional[UUID]:
    """
    Look up the guest registered for a normalized phone number.

    Returns:
        Optional[UUID]: Guest ID or None
    """
    result = conn.execute(
        text(f"SELECT id FROM {SCHEMA}.guests WHERE phone = :phone"),
        {"phone": phone},
    )
    row = result.fetchone()
    return row[0] if row else None
