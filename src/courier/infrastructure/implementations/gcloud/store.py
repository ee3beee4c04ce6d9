"""
Google Cloud Secret Manager certificate store.

Each secret is named by its storage key (``password-{id}`` or
``certificate-{id}``). Updates make sure the secret exists and append a new
version; reads always return the latest version.
"""

from loguru import logger

from courier.infrastructure.implementations.gcloud.secrets import (
    SecretManagerClient,
    SecretNotFoundError,
)
from courier.infrastructure.repositories.store import (
    CertificateStore,
    NotFoundError,
    SecretKind,
    storage_key,
)


class SecretManagerStore(CertificateStore):
    """Secret Manager implementation of CertificateStore."""

    def __init__(
        self,
        project: str | None = None,
        credentials: str | None = None,
        client: SecretManagerClient | None = None,
    ):
        """
        Open the Secret Manager store.

        Args:
            project: GCP project that owns the secrets
            credentials: Path to service account credentials (optional)
            client: Preconfigured secret manager client (optional)
        """
        if client is None:
            if not project:
                raise ValueError("a GCP project is required for secret manager storage")
            client = SecretManagerClient(project=project, credentials=credentials)

        self.client = client
        logger.info(f"Initialized SecretManagerStore for {self.client.parent}")

    async def get_password(self, secret_id: str) -> bytes:
        return await self._get(SecretKind.PASSWORD, secret_id)

    async def update_password(self, secret_id: str, password: bytes) -> None:
        await self._update(SecretKind.PASSWORD, secret_id, password)

    async def get_certificate(self, secret_id: str) -> bytes:
        return await self._get(SecretKind.CERTIFICATE, secret_id)

    async def update_certificate(self, secret_id: str, certificate: bytes) -> None:
        await self._update(SecretKind.CERTIFICATE, secret_id, certificate)

    async def close(self) -> None:
        await self.client.close()

    async def _get(self, kind: SecretKind, secret_id: str) -> bytes:
        try:
            return await self.client.get_latest_version(storage_key(kind, secret_id))
        except SecretNotFoundError as e:
            raise NotFoundError(str(e)) from e

    async def _update(self, kind: SecretKind, secret_id: str, data: bytes) -> None:
        name = storage_key(kind, secret_id)

        # Creating an existing secret is not an error
        await self.client.create_secret(name)
        await self.client.add_secret_version(name, data)
