from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import Connection

from venue_booking.models.guests import GuestRow


def insert_guest_if_absent(conn: Connection, name: str, phone: str) -> Optional[UUID]:
    """
    Register a guest for a normalized phone number unless one already exists.

    Args:
        conn (Connection): Active connection inside a transaction.
        name (str): Guest display name.
        phone (str): Normalized phone number.

    Returns:
        Optional[UUID]: The new guest ID, or None if the phone was already registered.
    """
    stmt = (
        insert(GuestRow)
        .values(id=uuid4(), phone=phone, name=name)
        .on_conflict_do_nothing(index_elements=["phone"])
        .returning(GuestRow.id)
    )
    row = conn.execute(stmt).fetchone()
    return row[0] if row else None
