"""
Backoff policies for the courier client.

A policy pairs a tenacity wait strategy with a stop strategy. The client takes
a factory rather than a policy so that every call starts from a fresh
schedule; the retry count configured on the client is always enforced in
addition to the policy's own stop condition.
"""

from collections.abc import Callable
from dataclasses import dataclass

from tenacity import (
    stop_after_delay,
    stop_never,
    wait_exponential,
    wait_fixed,
    wait_none,
    wait_random,
)
from tenacity.stop import stop_base
from tenacity.wait import wait_base

# Exponential schedule
INITIAL_INTERVAL = 0.5
MAX_INTERVAL = 60.0
JITTER = 0.25
MAX_ELAPSED = 15 * 60.0


@dataclass(frozen=True)
class Backoff:
    """Wait and stop strategies for one call."""

    wait: wait_base
    stop: stop_base = stop_never


BackoffFactory = Callable[[], Backoff]


def exponential_backoff() -> Backoff:
    """Randomized exponential backoff; the default policy."""
    return Backoff(
        wait=wait_exponential(multiplier=INITIAL_INTERVAL, max=MAX_INTERVAL)
        + wait_random(0, JITTER),
        stop=stop_after_delay(MAX_ELAPSED),
    )


def zero_backoff() -> Backoff:
    """Retry immediately."""
    return Backoff(wait=wait_none())


def constant_backoff(delay: float) -> BackoffFactory:
    """Return a factory that waits the same number of seconds between attempts."""

    def factory() -> Backoff:
        return Backoff(wait=wait_fixed(delay))

    return factory
