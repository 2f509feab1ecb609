"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP venue_booking_reservations_created_total Total number of reservations created
        # TYPE venue_booking_reservations_created_total counter
        venue_booking_reservations_created_total{source="online",status="pending"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose booking and database metrics in Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
