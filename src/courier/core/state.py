"""
Shared server state read by the probes and the availability middleware.

The server starts unavailable, becomes available once the store is open and
the application has started, and returns to unavailable as soon as shutdown
begins.
"""

import threading
import time
from enum import Enum


class Availability(str, Enum):
    """Whether the server is accepting API requests."""

    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"


class ServerState:
    """Health and readiness flags guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._availability = Availability.UNAVAILABLE
        self._healthy = False
        self._started = time.monotonic()

    @property
    def availability(self) -> Availability:
        with self._lock:
            return self._availability

    @availability.setter
    def availability(self, value: Availability) -> None:
        with self._lock:
            self._availability = value

    @property
    def ready(self) -> bool:
        return self.availability is Availability.AVAILABLE

    def set_ready(self, ready: bool) -> None:
        self.availability = (
            Availability.AVAILABLE if ready else Availability.UNAVAILABLE
        )

    @property
    def healthy(self) -> bool:
        with self._lock:
            return self._healthy

    def set_healthy(self, healthy: bool) -> None:
        with self._lock:
            self._healthy = healthy

    def mark_started(self) -> None:
        """Reset the uptime clock."""
        with self._lock:
            self._started = time.monotonic()

    def uptime(self) -> str:
        """Human readable time since the server started (e.g. ``1h2m3.5s``)."""
        with self._lock:
            elapsed = time.monotonic() - self._started
        return format_duration(elapsed)


def format_duration(seconds: float) -> str:
    """Format seconds as hours, minutes and seconds, omitting leading zeros."""
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours >= 1:
        return f"{int(hours)}h{int(minutes)}m{secs:.3f}s"
    if minutes >= 1:
        return f"{int(minutes)}m{secs:.3f}s"
    return f"{secs:.3f}s"
