"""
Routes registration for the FastAPI application.

Centralizes all router registrations for clean application setup.
"""

from fastapi import FastAPI

from courier.api.probez.router import router as probez_router
from courier.api.v1.certs.router import router as certs_router
from courier.api.v1.status.router import router as status_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Probes and metrics (no prefix, never gated)
    app.include_router(probez_router)

    # Versioned API
    app.include_router(status_router)
    app.include_router(certs_router)
