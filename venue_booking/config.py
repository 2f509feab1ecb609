import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

SCHEMA = "booking"

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Booking rules
BOOKING_GRACE_MINUTES = int(os.getenv("BOOKING_GRACE_MINUTES", "5"))

# "per_date" prices each billed segment with that date's override, "flat" ignores overrides
PRICING_POLICY = os.getenv("PRICING_POLICY", "per_date").lower()

GUEST_SURCHARGE_RATE = Decimal(os.getenv("GUEST_SURCHARGE_RATE", "0"))

ENFORCE_CALENDAR_BLOCKS = os.getenv("ENFORCE_CALENDAR_BLOCKS", "true").lower() == "true"

# Guests may not cancel inside their host's cancellation_window_hours; off by default
ENFORCE_CANCELLATION_WINDOW = (
    os.getenv("ENFORCE_CANCELLATION_WINDOW", "false").lower() == "true"
)

CONFIRMATION_PREFIX = os.getenv("CONFIRMATION_PREFIX", "SW")
CONFIRMATION_MAX_ATTEMPTS = int(os.getenv("CONFIRMATION_MAX_ATTEMPTS", "5"))
