"""Confirmation number generation."""

from __future__ import annotations

import secrets
from datetime import datetime
from typing import Optional

from venue_booking.config import CONFIRMATION_PREFIX
from venue_booking.utils.datetime import utc_now

SUFFIX_BYTES = 4  # 8 hex chars


def generate_confirmation_number(
    now: Optional[datetime] = None, prefix: str = CONFIRMATION_PREFIX
) -> str:
    """
    Build a sortable, human-readable booking reference.

    Format is ``{prefix}{yyyymmdd}{8 uppercase hex chars}``, e.g. ``SW20260114A3F09C1B``.
    Uniqueness is not assumed here: stores enforce it with a unique constraint
    and the booking service regenerates on collision.

    Args:
        now: Creation time used for the date prefix (defaults to UTC now)
        prefix: Leading brand prefix

    Returns:
        str: Confirmation number
    """
    now = now or utc_now()
    return f"{prefix}{now:%Y%m%d}{secrets.token_hex(SUFFIX_BYTES).upper()}"
