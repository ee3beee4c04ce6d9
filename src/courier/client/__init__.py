"""Async client for the courier API with retry and backoff."""

from courier.client.backoff import (
    Backoff,
    BackoffFactory,
    constant_backoff,
    exponential_backoff,
    zero_backoff,
)
from courier.client.client import CourierClient
from courier.client.errors import (
    ClientError,
    DeadlineExceededError,
    EndpointRequiredError,
    IDRequiredError,
    InvalidRetriesError,
    MultiStatusError,
    StatusError,
    UnexpectedContentTypeError,
    join_status_errors,
)

__all__ = [
    "Backoff",
    "BackoffFactory",
    "ClientError",
    "CourierClient",
    "DeadlineExceededError",
    "EndpointRequiredError",
    "IDRequiredError",
    "InvalidRetriesError",
    "MultiStatusError",
    "StatusError",
    "UnexpectedContentTypeError",
    "constant_backoff",
    "exponential_backoff",
    "join_status_errors",
    "zero_backoff",
]
