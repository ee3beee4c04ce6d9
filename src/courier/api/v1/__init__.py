"""
API v1 endpoints.

Route prefix constants for consistent API versioning.
"""

API_V1_PREFIX: str = "/v1"

CERTS_PREFIX: str = f"{API_V1_PREFIX}/certs"

__all__ = [
    "API_V1_PREFIX",
    "CERTS_PREFIX",
]
