"""Prometheus metrics for the courier service."""

from prometheus_client import Counter, Histogram

NAMESPACE = "trisa"
SUBSYSTEM = "courier"

# Counters for stored secrets
passwords_total = Counter(
    "passwords",
    "Counts the number of PKCS12 passwords successfully posted to courier",
    namespace=NAMESPACE,
    subsystem=SUBSYSTEM,
)

certificates_total = Counter(
    "certificates",
    "Counts the number of certificates successfully posted to courier",
    namespace=NAMESPACE,
    subsystem=SUBSYSTEM,
)

# Request tracking
requests_total = Counter(
    "requests",
    "Total HTTP requests handled by courier",
    ["method", "path", "code"],
    namespace=NAMESPACE,
    subsystem=SUBSYSTEM,
)

request_duration_seconds = Histogram(
    "request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
    namespace=NAMESPACE,
    subsystem=SUBSYSTEM,
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1, 5, 10],
)


__all__ = [
    "passwords_total",
    "certificates_total",
    "requests_total",
    "request_duration_seconds",
]
