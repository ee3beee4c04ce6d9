"""Local file-based storage backend."""

from courier.infrastructure.implementations.local.store import LocalStore

__all__ = ["LocalStore"]
