"""
Logging filters for Uvicorn access logs.

Kubernetes probes and the Prometheus scraper hit the server every few
seconds; their access lines are dropped so they do not drown real traffic.
"""

import logging


class ProbeFilter(logging.Filter):
    """Filter probe and metrics requests out of Uvicorn access logs."""

    EXCLUDED_PATHS = {"/healthz", "/livez", "/readyz", "/metrics"}

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if a log record should be logged.

        Uvicorn access log format: 'IP:PORT - "METHOD PATH PROTOCOL" STATUS'

        Args:
            record: Log record from Uvicorn

        Returns:
            False if the request path is a probe, True otherwise
        """
        message = record.getMessage()
        for path in self.EXCLUDED_PATHS:
            if f" {path} " in message or f'"{path}"' in message:
                return False
        return True
