"""
Certificate delivery webhook endpoints.

Receives PKCS#12 passwords and certificates for a certificate id, decrypts
certificates with their stored password, and persists the results.
"""

from fastapi import APIRouter, HTTPException, Response, status

from courier.api.v1 import CERTS_PREFIX
from courier.api.v1.certs.services import CertificateService, CertificateServiceError
from courier.di import StoreDep
from courier.models import StoreCertificateRequest, StorePasswordRequest

router = APIRouter(prefix=CERTS_PREFIX)


@router.post(
    "/{cert_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Store a certificate",
    description="""
    Store a base64 encoded PKCS#12 certificate.

    Unless `no_decrypt` is set, the certificate is decrypted with the password
    previously posted for the same id and stored unencrypted. With
    `no_decrypt` the certificate is stored exactly as received.
    """,
)
async def store_certificate(
    cert_id: str,
    request: StoreCertificateRequest,
    store: StoreDep,
) -> Response:
    """
    Store a certificate.

    Raises:
        HTTPException: 400/404/409/500 (see CertificateService)
    """
    try:
        await CertificateService(store).store_certificate(cert_id, request)
    except CertificateServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{cert_id}/pkcs12password",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Store a PKCS#12 password",
)
async def store_certificate_password(
    cert_id: str,
    request: StorePasswordRequest,
    store: StoreDep,
) -> Response:
    """
    Store the password for an encrypted certificate.

    Raises:
        HTTPException: 400 if the password is empty, 500 on storage errors
    """
    try:
        await CertificateService(store).store_password(cert_id, request)
    except CertificateServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
