"""Google Cloud Secret Manager storage backend."""

from courier.infrastructure.implementations.gcloud.secrets import (
    PayloadTooLargeError,
    PermissionDeniedError,
    SecretManagerClient,
    SecretManagerError,
    SecretNotFoundError,
)
from courier.infrastructure.implementations.gcloud.store import SecretManagerStore

__all__ = [
    "PayloadTooLargeError",
    "PermissionDeniedError",
    "SecretManagerClient",
    "SecretManagerError",
    "SecretManagerStore",
    "SecretNotFoundError",
]
