"""Prometheus request metrics middleware."""

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from courier.metrics import request_duration_seconds, requests_total

UNMATCHED = "unmatched"


def route_template(request: Request) -> str:
    """
    Get the template of the route that matched, e.g. /v1/certs/{cert_id}.

    A route matched inside an included router may report only the trailing
    part of its template. The missing leading segments are static prefixes,
    so they are taken verbatim from the request path.
    """
    template = getattr(request.scope.get("route"), "path", None)
    if not template:
        return UNMATCHED

    path_parts = request.scope["path"].rstrip("/").split("/")
    template_parts = template.rstrip("/").split("/")
    missing = len(path_parts) - len(template_parts)
    if missing <= 0:
        return template

    return "/".join(path_parts[: missing + 1] + template_parts[1:])


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts requests and records their latency by route template."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Use the route template so certificate ids do not become labels
        path = route_template(request)

        requests_total.labels(request.method, path, str(response.status_code)).inc()
        request_duration_seconds.labels(request.method, path).observe(elapsed)
        return response
