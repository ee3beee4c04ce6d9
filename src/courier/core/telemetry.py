"""
OpenTelemetry configuration for distributed tracing.

This module configures OpenTelemetry with:
- FastAPI automatic instrumentation (probe and metrics paths excluded)
- HTTPX client instrumentation for the courier client
- OTLP export to a collector, or console export when no endpoint is set

Tracing is opt-in with ``COURIER_OTEL_ENABLED=true``.
"""

from fastapi import FastAPI
from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from courier import __version__
from courier.config import Settings

EXCLUDED_URLS = "/healthz,/livez,/readyz,/metrics"


def configure_opentelemetry(settings: Settings) -> TracerProvider:
    """
    Register a global tracer provider for the courier service.

    Args:
        settings: Application settings (service name, collector endpoint, mode)

    Returns:
        The registered TracerProvider
    """
    resource = Resource.create(
        attributes={
            "service.name": settings.otel_service_name,
            "service.version": __version__,
            "deployment.environment": settings.mode,
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    if settings.otel_exporter_otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
        logger.info(
            f"OTLP span exporter configured: endpoint={settings.otel_exporter_otlp_endpoint}"
        )
    else:
        exporter = ConsoleSpanExporter()
        logger.info("Console span exporter configured")

    tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    logger.info(
        f"OpenTelemetry configured: service={settings.otel_service_name}, "
        f"version={__version__}, mode={settings.mode}"
    )
    return tracer_provider


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by the application except probes."""
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=trace.get_tracer_provider(),
        excluded_urls=EXCLUDED_URLS,
    )
    logger.info("FastAPI instrumented with OpenTelemetry")


def instrument_httpx() -> None:
    """Trace outgoing requests made by the courier client."""
    HTTPXClientInstrumentor().instrument()
    logger.info("HTTPX client instrumented with OpenTelemetry")


def get_current_trace_id() -> str | None:
    """Return the active trace id as hex, or None outside of a span."""
    span = trace.get_current_span()
    context = span.get_span_context()
    if context.is_valid:
        return format(context.trace_id, "032x")
    return None
