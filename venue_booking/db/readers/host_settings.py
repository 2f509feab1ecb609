from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Connection

from venue_booking.config import SCHEMA
from venue_booking.domain.models import HostSettings


def get_host_settings(conn: Connection, host_id: UUID) -> HostSettings:
    """
    Fetch a host's business settings, falling back to defaults.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        host_id (UUID): Host ID.

    Returns:
        HostSettings: Stored settings, or defaults if the host never saved any.
    """
    result = conn.execute(
        text(
            f"""
            SELECT auto_confirm_reservations, cancellation_window_hours
            FROM {SCHEMA}.host_settings
            WHERE host_id = :host_id
        """
        ),
        {"host_id": host_id},
    )
    row = result.fetchone()
    if row is None:
        return HostSettings(host_id=host_id)
    return HostSettings(
        host_id=host_id,
        auto_confirm_reservations=row[0],
        cancellation_window_hours=row[1],
    )
