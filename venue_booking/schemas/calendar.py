import datetime as dt
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CalendarDayUpdate(BaseModel):
    date: dt.date
    is_available: bool = Field(True, description="False closes the date to bookings")
    custom_price: Optional[Decimal] = Field(
        None, description="Daily price for the date; defaults to the venue's base daily price"
    )
    custom_hourly_price: Optional[Decimal] = Field(None, description="Hourly price for the date")
    note: Optional[str] = Field(None, max_length=500, description="Operator note")


class CalendarUpdatePayload(BaseModel):
    """
    Schema for upserting daily overrides of one listing.
    """

    listing_id: UUID = Field(..., description="Listing whose calendar is edited")
    updates: list[CalendarDayUpdate] = Field(..., min_length=1, max_length=366)


class CalendarDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    is_available: bool
    reservation_count: int
    custom_price: Optional[Decimal] = None


class DailyOverrideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listing_id: UUID
    date: dt.date
    price: Decimal
    hourly_price: Optional[Decimal] = None
    is_available: bool
    note: Optional[str] = None
