"""
FastAPI middleware for request tracing and correlation.

Every request gets a unique ID that is echoed in the X-Request-ID response
header and bound into structlog's context, so all log lines emitted while
handling the request carry it.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add unique request IDs to each HTTP request.

    An incoming X-Request-ID header is reused so IDs issued by an upstream
    gateway stay stable; otherwise a UUID4 is generated.

    Example:
        >>> app.add_middleware(RequestIDMiddleware)
        >>>
        >>> @router.get("/reservations/{reservation_id}")
        >>> def get_reservation(request: Request):
        ...     logger.info("reservation_viewed")  # log line includes request_id
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """
        Process each request by adding a unique request ID.

        Args:
            request: Incoming FastAPI request
            call_next: Next middleware or route handler in chain

        Returns:
            Response with X-Request-ID header added
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id
        return response
