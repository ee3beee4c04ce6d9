"""
Google Cloud Secret Manager client wrapper.

Exposes the four operations the courier store needs (create a secret, add a
version, read the latest version, delete a secret) and translates the gRPC
error domain into courier exceptions. Secrets are created with automatic
replication under ``projects/{project}``.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from google.api_core import exceptions as gexc
from google.cloud import secretmanager
from loguru import logger

DEFAULT_TIMEOUT = 5.0


class SecretManagerError(Exception):
    """Base class for translated Secret Manager errors."""


class SecretNotFoundError(SecretManagerError):
    """The secret (or its latest version) does not exist."""

    def __init__(self, message: str = "secret not found"):
        super().__init__(message)


class PayloadTooLargeError(SecretManagerError):
    """Secret Manager rejected the payload (larger than 64KiB)."""

    def __init__(self, message: str = "secret payload too large"):
        super().__init__(message)


class PermissionDeniedError(SecretManagerError):
    """The credentials cannot access the secret or project."""

    def __init__(self, message: str = "secret access denied"):
        super().__init__(message)


# Errors each call understands; anything else propagates unchanged
ACCESS_ERRORS: dict[type[gexc.GoogleAPICallError], type[SecretManagerError]] = {
    gexc.NotFound: SecretNotFoundError,
}

ADD_VERSION_ERRORS: dict[type[gexc.GoogleAPICallError], type[SecretManagerError]] = {
    gexc.NotFound: SecretNotFoundError,
    gexc.InvalidArgument: PayloadTooLargeError,
    gexc.PermissionDenied: PermissionDeniedError,
}


@contextmanager
def translate_errors(
    mapping: dict[type[gexc.GoogleAPICallError], type[SecretManagerError]],
) -> Iterator[None]:
    """
    Map google-api-core errors onto the courier errors they represent.

    Only the errors named in mapping are translated. Deadline errors and
    anything unrecognized propagate unchanged.
    """
    try:
        yield
    except gexc.GoogleAPICallError as e:
        for google_error, error in mapping.items():
            if isinstance(e, google_error):
                raise error() from e
        raise


class SecretManagerClient:
    """
    Wrapper around the async Secret Manager client.

    The underlying client is created lazily on first use so that it binds to
    the running event loop; pass ``client`` to inject a fake in tests.
    """

    def __init__(
        self,
        project: str,
        credentials: str | None = None,
        client: secretmanager.SecretManagerServiceAsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            project: GCP project that owns the secrets
            credentials: Path to a service account JSON file (optional)
            client: Preconfigured async client (optional)
            timeout: Default per-call timeout in seconds
        """
        self.parent = f"projects/{project}"
        self.credentials = credentials
        self.timeout = timeout
        self._client = client
        self._closed = False

    @property
    def client(self) -> secretmanager.SecretManagerServiceAsyncClient:
        """Lazy-initialize client."""
        if self._client is None:
            if self.credentials:
                self._client = (
                    secretmanager.SecretManagerServiceAsyncClient.from_service_account_file(
                        self.credentials
                    )
                )
            else:
                self._client = secretmanager.SecretManagerServiceAsyncClient()
        return self._client

    def _secret_path(self, name: str) -> str:
        return f"{self.parent}/secrets/{name}"

    async def create_secret(self, name: str, timeout: float | None = None) -> None:
        """
        Create the secret container if it does not already exist.

        Secrets are versioned and reads always use the latest version, so an
        existing secret is not an error.
        """
        request = {
            "parent": self.parent,
            "secret_id": name,
            "secret": {"replication": {"automatic": {}}},
        }

        try:
            # Response discarded to avoid leaking secret metadata
            await self.client.create_secret(
                request=request, timeout=timeout or self.timeout
            )
        except gexc.AlreadyExists:
            logger.debug(f"Secret {name} already exists")
            return

        logger.debug(f"Created secret {name}")

    async def add_secret_version(
        self, name: str, payload: bytes, timeout: float | None = None
    ) -> None:
        """
        Add a new version holding payload to an existing secret.

        Raises:
            SecretNotFoundError: If the secret has not been created
            PayloadTooLargeError: If the payload exceeds the service limit
            PermissionDeniedError: If the project or secret is not accessible
        """
        request = {
            "parent": self._secret_path(name),
            "payload": {"data": payload},
        }

        with translate_errors(ADD_VERSION_ERRORS):
            await self.client.add_secret_version(
                request=request, timeout=timeout or self.timeout
            )

    async def get_latest_version(self, name: str, timeout: float | None = None) -> bytes:
        """
        Return the payload of the latest version of a secret.

        Raises:
            SecretNotFoundError: If the secret or its versions do not exist
        """
        request = {"name": f"{self._secret_path(name)}/versions/latest"}

        with translate_errors(ACCESS_ERRORS):
            result = await self.client.access_secret_version(
                request=request, timeout=timeout or self.timeout
            )

        return result.payload.data

    async def delete_secret(self, name: str, timeout: float | None = None) -> None:
        """
        Delete a secret and all of its versions.

        This is irreversible; later reads of the secret raise
        SecretNotFoundError.
        """
        request = {"name": self._secret_path(name)}

        await self.client.delete_secret(
            request=request, timeout=timeout or self.timeout
        )

        logger.info(f"Deleted secret {name}")

    async def close(self) -> None:
        """Close the gRPC transport if a client was created."""
        if self._closed:
            return

        self._closed = True
        if self._client is not None:
            await self._client.transport.close()
