"""
Certificate delivery service.

Orchestrates decode → (optional) decrypt → store for certificate uploads and
store for password uploads. Errors are raised as CertificateServiceError
carrying the HTTP status the handler should answer with.
"""

import base64
import binascii

from fastapi import status
from loguru import logger

from courier.infrastructure.repositories import CertificateStore, NotFoundError
from courier.metrics import certificates_total, passwords_total
from courier.models import StoreCertificateRequest, StorePasswordRequest
from courier.services import pkcs12

MISSING_CERTIFICATE = "missing certificate in request"
MISSING_PASSWORD = "missing password in request"
PASSWORD_NOT_FOUND = "pkcs12 password not found, unable to decrypt certificate"
DECRYPTION_FAILED = "failed to decrypt certificate with stored pkcs12 password"


class CertificateServiceError(Exception):
    """A request could not be completed; status_code is the HTTP answer."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class CertificateService:
    """Stores certificates and PKCS#12 passwords in the configured backend."""

    def __init__(self, store: CertificateStore):
        self.store = store

    async def store_certificate(
        self, cert_id: str, request: StoreCertificateRequest
    ) -> None:
        """
        Decode, optionally decrypt, and store a certificate.

        Args:
            cert_id: Certificate id from the request path
            request: Parsed request body

        Raises:
            CertificateServiceError: 400 for a missing or undecodable
                certificate, 404 if no password is stored, 409 if the stored
                password does not decrypt the certificate, 500 on storage
                failures
        """
        if not request.base64_certificate:
            raise CertificateServiceError(
                status.HTTP_400_BAD_REQUEST, MISSING_CERTIFICATE
            )

        try:
            data = base64.b64decode(request.base64_certificate, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CertificateServiceError(
                status.HTTP_400_BAD_REQUEST, f"could not decode certificate: {e}"
            ) from e

        if not request.no_decrypt:
            data = await self._decrypt(cert_id, data)

        try:
            await self.store.update_certificate(cert_id, data)
        except Exception as e:
            logger.exception(f"Could not store certificate {cert_id}")
            raise CertificateServiceError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, str(e)
            ) from e

        certificates_total.inc()
        logger.info(
            f"Stored certificate {cert_id} (decrypted={not request.no_decrypt})"
        )

    async def store_password(self, cert_id: str, request: StorePasswordRequest) -> None:
        """
        Store the PKCS#12 password for a certificate.

        Raises:
            CertificateServiceError: 400 for an empty password, 500 on storage
                failures
        """
        if not request.password:
            raise CertificateServiceError(status.HTTP_400_BAD_REQUEST, MISSING_PASSWORD)

        try:
            await self.store.update_password(cert_id, request.password.encode("utf-8"))
        except Exception as e:
            logger.exception(f"Could not store password for {cert_id}")
            raise CertificateServiceError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, str(e)
            ) from e

        passwords_total.inc()
        logger.info(f"Stored pkcs12 password for {cert_id}")

    async def _decrypt(self, cert_id: str, data: bytes) -> bytes:
        try:
            password = await self.store.get_password(cert_id)
        except NotFoundError as e:
            raise CertificateServiceError(
                status.HTTP_404_NOT_FOUND, PASSWORD_NOT_FOUND
            ) from e
        except Exception as e:
            logger.exception(f"Could not retrieve password for {cert_id}")
            raise CertificateServiceError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, str(e)
            ) from e

        # Wrong password and malformed bundle are reported identically
        try:
            bundle = pkcs12.decrypt(data, password)
        except pkcs12.DecryptionError as e:
            logger.warning(f"Could not decrypt certificate {cert_id}: {e}")
            raise CertificateServiceError(
                status.HTTP_409_CONFLICT, DECRYPTION_FAILED
            ) from e

        try:
            return pkcs12.encode(bundle)
        except Exception as e:
            logger.exception(f"Could not encode decrypted certificate {cert_id}")
            raise CertificateServiceError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, str(e)
            ) from e
