"""
Kubernetes probe and Prometheus endpoints.

These endpoints bypass the availability middleware so that orchestrators can
observe the server while it is starting, stopping or in maintenance.
"""

from http import HTTPStatus

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from courier.di import ServerStateDep

router = APIRouter()


def _probe_response(ok: bool) -> Response:
    code = HTTPStatus.OK if ok else HTTPStatus.SERVICE_UNAVAILABLE
    return Response(content=code.phrase, status_code=code, media_type="text/plain")


@router.get("/healthz")
@router.get("/livez")
async def healthz(state: ServerStateDep) -> Response:
    """Liveness probe: 200 while the server is healthy."""
    return _probe_response(state.healthy)


@router.get("/readyz")
async def readyz(state: ServerStateDep) -> Response:
    """Readiness probe: 200 once the server accepts API requests."""
    return _probe_response(state.ready)


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics in the text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
