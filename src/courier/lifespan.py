"""
Application lifecycle management.

Startup opens the storage backend and marks the server healthy and ready.
Shutdown first marks the server unavailable, so the availability middleware
reports "stopping", then closes the store.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from courier.core.state import ServerState
from courier.infrastructure import open_store


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Args:
        app: FastAPI application created by create_app
    """
    settings = app.state.settings
    state: ServerState = app.state.server_state

    logger.info(f"Starting courier server v{app.version}")

    if settings.maintenance:
        logger.warning("Courier server is in maintenance mode, storage is not opened")
    elif app.state.store is None:
        app.state.store = open_store(settings)

    state.set_healthy(True)
    state.mark_started()
    state.set_ready(True)
    logger.info(f"Courier server ready (bind_addr={settings.bind_addr})")

    try:
        yield
    finally:
        logger.info("Gracefully shutting down courier server")
        state.set_healthy(False)
        state.set_ready(False)

        if app.state.store is not None:
            try:
                await app.state.store.close()
            except Exception:
                logger.exception("Could not close storage backend")
                raise

        logger.debug("Shut down courier server")
