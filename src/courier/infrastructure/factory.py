"""
Storage backend selection.

Opens the backend enabled in configuration:
- local: gzip archives on disk
- gcloud: Google Cloud Secret Manager

Usage:
    from courier.config import get_settings
    from courier.infrastructure import open_store

    store = open_store(get_settings())
"""

from typing import TYPE_CHECKING

from loguru import logger

from courier.config import ConfigurationError
from courier.infrastructure.repositories import CertificateStore

if TYPE_CHECKING:
    from courier.config import Settings


def open_store(settings: "Settings") -> CertificateStore:
    """
    Open the storage backend selected by the settings.

    Args:
        settings: Application settings

    Returns:
        CertificateStore implementation

    Raises:
        ConfigurationError: If no storage backend is enabled
    """
    if settings.local_storage_enabled:
        from courier.infrastructure.implementations.local import LocalStore

        logger.info("Opening local storage backend")
        return LocalStore(base_dir=settings.local_storage_path)

    elif settings.gcp_secret_manager_enabled:
        from courier.infrastructure.implementations.gcloud import SecretManagerStore

        logger.info("Opening GCP secret manager storage backend")
        return SecretManagerStore(
            project=settings.gcp_secret_manager_project,
            credentials=settings.gcp_secret_manager_credentials or None,
        )

    raise ConfigurationError("no storage backend configured")
