"""
Prometheus metrics for monitoring booking decisions and database operations.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from venue_booking.metrics import booking_operation_duration, reservations_created
    >>> with booking_operation_duration.labels(operation="create_reservation").time():
    ...     reservation = service.create_reservation(...)
    ...     reservations_created.labels(source="online", status="pending").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

reservations_created = Counter(
    "venue_booking_reservations_created_total",
    "Total number of reservations created",
    ["source", "status"],
)
"""
Counter for created reservations.

Labels:
    source: online, phone or walk_in
    status: Initial status (pending, or confirmed when auto-confirm applies)
"""

booking_rejections = Counter(
    "venue_booking_rejections_total",
    "Total number of booking requests rejected by business rules",
    ["reason"],
)
"""
Counter for rejected booking requests.

Labels:
    reason: venue_not_found, venue_inactive, guest_count, invalid_window,
        past_start, date_blocked, overlap, constraint_overlap
"""

reservation_transitions = Counter(
    "venue_booking_reservation_transitions_total",
    "Total number of reservation status transitions",
    ["from_status", "to_status"],
)
"""
Counter for status transitions applied through the state machine.

Labels:
    from_status: Status before the transition
    to_status: Status after the transition
"""

booking_operation_duration = Histogram(
    "venue_booking_operation_duration_seconds",
    "Duration of booking engine operations in seconds",
    ["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, float("inf")),
)
"""
Histogram for booking engine operation duration.

Labels:
    operation: create_reservation, create_manual_reservation, cancel_reservation,
        update_reservation_status, check_availability
"""

# =============================================================================
# Calendar Metrics
# =============================================================================

calendar_days_updated = Counter(
    "venue_booking_calendar_days_updated_total",
    "Total number of calendar override days upserted",
)
"""Counter for upserted daily overrides."""

# =============================================================================
# Database Metrics
# =============================================================================

db_operations = Counter(
    "venue_booking_db_operations_total",
    "Total database operations performed",
    ["operation", "table"],
)
"""
Counter for database operations.

Labels:
    operation: Type of operation (insert, update, upsert, select)
    table: Database table name (reservations, daily_overrides, guests, reviews)
"""
