"""
Dependency injection for courier handlers.

The store and the server state are created once by the application factory
and lifespan and kept on ``app.state``; handlers receive them through
FastAPI's Depends with typing.Annotated.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from courier.config import Settings, get_settings
from courier.core.state import ServerState
from courier.infrastructure.repositories import CertificateStore

# ============================================================================
# Settings Dependencies
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


# ============================================================================
# Server State Dependencies
# ============================================================================


def get_server_state(request: Request) -> ServerState:
    """Get the shared server state from the application."""
    return request.app.state.server_state


ServerStateDep = Annotated[ServerState, Depends(get_server_state)]
"""Injected ServerState shared with the availability middleware."""


# ============================================================================
# Storage Dependencies
# ============================================================================


def get_store(request: Request) -> CertificateStore:
    """
    Get the storage backend opened at startup.

    Raises:
        HTTPException: If no store is open (e.g. maintenance mode)
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="storage backend is not available",
        )
    return store


StoreDep = Annotated[CertificateStore, Depends(get_store)]
"""Injected CertificateStore."""
