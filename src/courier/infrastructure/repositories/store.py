"""
Abstract interface for certificate and password storage.

Every secret is addressed by its kind and a caller supplied id. The kind
prefix keeps passwords and certificates with the same id from colliding:

    password-{id}
    certificate-{id}
"""

from abc import ABC, abstractmethod
from enum import Enum


class NotFoundError(Exception):
    """Raised when no secret is stored under the requested key."""

    def __init__(self, message: str = "secret not found"):
        super().__init__(message)


class SecretKind(str, Enum):
    """Kinds of secrets held by the store; the value is the key prefix."""

    PASSWORD = "password"
    CERTIFICATE = "certificate"


def storage_key(kind: SecretKind, secret_id: str) -> str:
    """
    Derive the storage key for a secret.

    Args:
        kind: Kind of secret being stored
        secret_id: Caller supplied certificate id

    Returns:
        Key of the form ``<prefix>-<id>``

    Raises:
        ValueError: If the id is empty
    """
    if not secret_id:
        raise ValueError("secret id must not be empty")
    return f"{kind.value}-{secret_id}"


class CertificateStore(ABC):
    """
    Abstract interface for certificate and password storage.

    Updates create the secret if it does not exist and overwrite it otherwise.
    Reads raise NotFoundError when nothing has been stored for the id; any
    other backend failure propagates unchanged.
    """

    @abstractmethod
    async def get_password(self, secret_id: str) -> bytes:
        """
        Retrieve the PKCS#12 password for a certificate.

        Args:
            secret_id: Certificate id

        Returns:
            Password bytes

        Raises:
            NotFoundError: If no password is stored for the id
        """

    @abstractmethod
    async def update_password(self, secret_id: str, password: bytes) -> None:
        """
        Create or overwrite the PKCS#12 password for a certificate.

        Args:
            secret_id: Certificate id
            password: Password bytes
        """

    @abstractmethod
    async def get_certificate(self, secret_id: str) -> bytes:
        """
        Retrieve a stored certificate.

        Args:
            secret_id: Certificate id

        Returns:
            Certificate container bytes (decrypted or as received)

        Raises:
            NotFoundError: If no certificate is stored for the id
        """

    @abstractmethod
    async def update_certificate(self, secret_id: str, certificate: bytes) -> None:
        """
        Create or overwrite a certificate.

        Args:
            secret_id: Certificate id
            certificate: Certificate container bytes
        """

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources; safe to call more than once."""
