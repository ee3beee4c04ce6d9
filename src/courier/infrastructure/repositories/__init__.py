"""Abstract storage interface shared by all backends."""

from courier.infrastructure.repositories.store import (
    CertificateStore,
    NotFoundError,
    SecretKind,
    storage_key,
)

__all__ = [
    "CertificateStore",
    "NotFoundError",
    "SecretKind",
    "storage_key",
]
