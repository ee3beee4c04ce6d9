"""
Availability middleware.

Rejects API traffic with 503 Service Unavailable while the server is in
maintenance mode, still starting up, or shutting down. Probe and metrics
endpoints are never gated.
"""

from collections.abc import Callable
from typing import Any

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from courier import __version__
from courier.core.responses import CourierJSONResponse
from courier.core.state import ServerState
from courier.models import StatusReply

SERVER_STATUS_OK = "ok"
SERVER_STATUS_STOPPING = "stopping"
SERVER_STATUS_MAINTENANCE = "maintenance"

EXEMPT_PATHS = frozenset({"/healthz", "/livez", "/readyz", "/metrics"})


class AvailabilityMiddleware(BaseHTTPMiddleware):
    """
    Short-circuits requests when the server is not ready.

    Attributes:
        state: Shared server state
        maintenance: Whether the server was started in maintenance mode
        unavailable_status: Status label reported while unavailable
    """

    def __init__(self, app: Any, state: ServerState, maintenance: bool = False):
        super().__init__(app)
        self.state = state
        self.maintenance = maintenance

        # Maintenance mode is fixed for the lifetime of the process
        self.unavailable_status = (
            SERVER_STATUS_MAINTENANCE if maintenance else SERVER_STATUS_STOPPING
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        if self.maintenance or not self.state.ready:
            reply = StatusReply(
                status=self.unavailable_status,
                uptime=self.state.uptime(),
                version=__version__,
            )
            return CourierJSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=reply.model_dump(),
            )

        return await call_next(request)
