"""
FastAPI application factory.

Creates and configures the FastAPI application with all middleware,
routers, and exception handlers.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from courier import __version__
from courier.config import Settings, get_settings
from courier.core.logging import logger
from courier.core.responses import CourierJSONResponse
from courier.core.state import ServerState
from courier.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from courier.infrastructure.repositories import CertificateStore
from courier.lifespan import lifespan
from courier.middleware import (
    AvailabilityMiddleware,
    MetricsMiddleware,
    TraceIDMiddleware,
)
from courier.routes import register_routes


def create_app(
    settings: Settings | None = None,
    store: CertificateStore | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration (defaults to the environment)
        store: Storage backend to use instead of opening one from settings

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationError: If the settings are invalid
    """
    settings = settings or get_settings()
    settings.validate_config()

    debug = settings.mode == "debug"
    app = FastAPI(
        title="Courier",
        description="Standalone certificate delivery webhook service",
        version=__version__,
        lifespan=lifespan,
        default_response_class=CourierJSONResponse,
        debug=debug,
        docs_url="/docs" if debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if debug else None,
    )

    app.state.settings = settings
    app.state.server_state = ServerState()
    app.state.store = store

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Last added runs first: trace id, metrics, then the availability gate
    app.add_middleware(
        AvailabilityMiddleware,
        state=app.state.server_state,
        maintenance=settings.maintenance,
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(TraceIDMiddleware)

    register_routes(app)

    logger.info(f"FastAPI application created (v{__version__}, mode={settings.mode})")
    return app
