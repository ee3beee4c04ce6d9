"""
Main entry point for running the courier server with uvicorn.

    python -m courier.main
    uvicorn --factory courier.application:create_app
"""

import ssl

import uvicorn

from courier.application import create_app
from courier.config import Settings, get_settings
from courier.core.logging import intercept_standard_logging
from courier.core.telemetry import (
    configure_opentelemetry,
    instrument_fastapi,
    instrument_httpx,
)

# Intercept logs from uvicorn and other libraries
intercept_standard_logging()


def serve(settings: Settings | None = None) -> None:
    """
    Run the courier server until interrupted.

    Uvicorn handles SIGINT/SIGTERM by running the lifespan shutdown, which
    marks the server as stopping and closes the store.
    """
    settings = settings or get_settings()
    settings.validate_config()
    host, port = settings.get_bind_host_port()

    app = create_app(settings)
    if settings.otel_enabled:
        configure_opentelemetry(settings)
        instrument_httpx()
        instrument_fastapi(app)

    tls: dict = {}
    if not settings.mtls_insecure:
        tls = {
            "ssl_certfile": settings.mtls_cert_path,
            "ssl_ca_certs": settings.mtls_pool_path,
            "ssl_cert_reqs": ssl.CERT_REQUIRED,
        }

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if settings.mode == "debug" else "info",
        timeout_graceful_shutdown=30,
        **tls,
    )


if __name__ == "__main__":
    serve()
