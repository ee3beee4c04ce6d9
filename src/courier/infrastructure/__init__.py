"""
Storage layer for certificates and their PKCS#12 passwords.

Exactly one backend is selected at startup from configuration:
- local: gzip archives in a directory on disk
- gcloud: versioned secrets in Google Cloud Secret Manager
"""

from courier.infrastructure.factory import open_store

__all__ = ["open_store"]
