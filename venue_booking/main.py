# venue_booking/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from venue_booking.config import ALLOWED_ORIGINS
from venue_booking.logging_config import setup_logging
from venue_booking.middleware import RequestIDMiddleware
from venue_booking.routes.health import router as health_router
from venue_booking.routes.host import router as host_router
from venue_booking.routes.listings import router as listings_router
from venue_booking.routes.metrics import router as metrics_router
from venue_booking.routes.reservations import router as reservations_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Venue Booking API",
    description="Reservations, availability and calendars for beaches, pools, yachts and day trips",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(reservations_router, tags=["Reservations"])
app.include_router(listings_router, tags=["Listings"])
app.include_router(host_router, prefix="/host", tags=["Host"])

logger.info("app_initialized", title=app.title)
