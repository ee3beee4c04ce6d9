"""
Models package.

Request and reply models shared by the server handlers and the API client.
"""

from courier.models.api import (
    Reply,
    StatusReply,
    StoreCertificateRequest,
    StorePasswordRequest,
)

__all__ = [
    "Reply",
    "StatusReply",
    "StoreCertificateRequest",
    "StorePasswordRequest",
]
