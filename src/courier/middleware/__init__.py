"""
Middleware to add trace_id to each request.

The trace_id allows tracking logs from the same HTTP request throughout
the entire application.
"""

import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from courier.core.logging import logger
from courier.core.telemetry import get_current_trace_id
from courier.core.trace_context import trace_id_context

QUIET_PATHS = frozenset({"/healthz", "/livez", "/readyz", "/metrics"})


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique trace_id to each request.

    Flow:
    1. Request arrives → reuses X-Trace-ID header, the active OpenTelemetry
       trace id, or generates a UUID
    2. Stores trace_id in contextvars
    3. All logs automatically include the trace_id
    4. Response includes X-Trace-ID header
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = (
            request.headers.get("X-Trace-ID")
            or get_current_trace_id()
            or str(uuid.uuid4())
        )
        token = trace_id_context.set(trace_id)
        quiet = request.url.path in QUIET_PATHS

        if not quiet:
            logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            response.headers["X-Trace-ID"] = trace_id

            if not quiet:
                logger.info(
                    f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}"  # noqa: E501
                )
            return response

        except Exception:
            logger.exception(f"Request failed: {request.method} {request.url.path}")
            raise

        finally:
            trace_id_context.reset(token)


from courier.middleware.availability import AvailabilityMiddleware  # noqa: E402
from courier.middleware.metrics import MetricsMiddleware  # noqa: E402

__all__ = ["TraceIDMiddleware", "AvailabilityMiddleware", "MetricsMiddleware"]
