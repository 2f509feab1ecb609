from sqlalchemy import TIMESTAMP, Boolean, Column, Integer, text
from sqlalchemy.dialects.postgresql import UUID

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class HostSettingsRow(Base):
    """ORM model for per-host business settings (auto-confirm, cancellation window)."""

    __tablename__ = "host_settings"
    __table_args__ = {"schema": SCHEMA}

    host_id = Column(UUID, primary_key=True)
    auto_confirm_reservations = Column(Boolean, nullable=False, server_default=text("FALSE"))
    cancellation_window_hours = Column(Integer, nullable=False, server_default=text("24"))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
