"""
Unit tests for the certificate delivery service.

Uses the in-memory mock store from conftest.
"""

import base64

import pytest
from cryptography.hazmat.primitives.serialization import pkcs12 as crypto_pkcs12

from courier.api.v1.certs.services import (
    DECRYPTION_FAILED,
    MISSING_CERTIFICATE,
    MISSING_PASSWORD,
    PASSWORD_NOT_FOUND,
    CertificateService,
    CertificateServiceError,
)
from courier.infrastructure.repositories import NotFoundError
from courier.models import StoreCertificateRequest, StorePasswordRequest


@pytest.fixture
def service(mock_store):
    """Create a service over the mock store."""
    return CertificateService(mock_store)


def certificate_request(data: bytes, no_decrypt: bool = False) -> StoreCertificateRequest:
    return StoreCertificateRequest(
        id="1234",
        no_decrypt=no_decrypt,
        base64_certificate=base64.b64encode(data).decode(),
    )


# ===========================
# Passwords
# ===========================


@pytest.mark.asyncio
async def test_store_password(service, mock_store):
    """Test a password is stored as utf-8 bytes."""
    await service.store_password("1234", StorePasswordRequest(password="supersecret"))

    assert mock_store.passwords["1234"] == b"supersecret"


@pytest.mark.asyncio
async def test_store_empty_password(service, mock_store):
    """Test an empty password is rejected before touching the store."""
    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_password("1234", StorePasswordRequest(password=""))

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == MISSING_PASSWORD
    assert mock_store.calls == {}


@pytest.mark.asyncio
async def test_store_password_storage_error(service, mock_store):
    """Test a storage failure is a 500 with the error text."""

    async def fail(secret_id, value):
        raise RuntimeError("disk full")

    mock_store.callbacks["update_password"] = fail

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_password("1234", StorePasswordRequest(password="secret"))

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "disk full"


# ===========================
# Certificates
# ===========================


@pytest.mark.asyncio
async def test_store_certificate_decrypts(
    service, mock_store, encrypted_pkcs12, pkcs12_password, certificate_bundle
):
    """Test the certificate is decrypted with the stored password."""
    _, cert = certificate_bundle
    mock_store.passwords["1234"] = pkcs12_password.encode()

    await service.store_certificate("1234", certificate_request(encrypted_pkcs12))

    stored = mock_store.certificates["1234"]
    assert stored != encrypted_pkcs12
    assert crypto_pkcs12.load_pkcs12(stored, None).cert.certificate == cert


@pytest.mark.asyncio
async def test_store_certificate_no_decrypt(service, mock_store, encrypted_pkcs12):
    """Test no_decrypt stores the bytes exactly as received."""
    await service.store_certificate(
        "1234", certificate_request(encrypted_pkcs12, no_decrypt=True)
    )

    assert mock_store.certificates["1234"] == encrypted_pkcs12
    assert "get_password" not in mock_store.calls


@pytest.mark.asyncio
async def test_store_certificate_missing(service):
    """Test an empty certificate is a 400."""
    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", StoreCertificateRequest(id="1234"))

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == MISSING_CERTIFICATE


@pytest.mark.asyncio
async def test_store_certificate_bad_base64(service, mock_store):
    """Test undecodable base64 is a 400 and nothing is stored."""
    request = StoreCertificateRequest(id="1234", base64_certificate="not base64!!")

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", request)

    assert excinfo.value.status_code == 400
    assert excinfo.value.message.startswith("could not decode certificate")
    assert mock_store.certificates == {}


@pytest.mark.asyncio
async def test_store_certificate_without_password(service, mock_store, encrypted_pkcs12):
    """Test decrypting without a stored password is a 404."""
    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", certificate_request(encrypted_pkcs12))

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == PASSWORD_NOT_FOUND
    assert mock_store.certificates == {}


@pytest.mark.asyncio
async def test_store_certificate_wrong_password(service, mock_store, encrypted_pkcs12):
    """Test a password that does not decrypt the bundle is a 409."""
    mock_store.passwords["1234"] = b"wrong"

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", certificate_request(encrypted_pkcs12))

    assert excinfo.value.status_code == 409
    assert excinfo.value.message == DECRYPTION_FAILED
    assert mock_store.certificates == {}


@pytest.mark.asyncio
async def test_store_certificate_not_pkcs12(service, mock_store):
    """Test data that is not PKCS#12 is reported like a wrong password."""
    mock_store.passwords["1234"] = b"secret"

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", certificate_request(b"garbage"))

    assert excinfo.value.status_code == 409


@pytest.mark.asyncio
async def test_password_lookup_error(service, mock_store, encrypted_pkcs12):
    """Test a failing password lookup (other than not found) is a 500."""

    async def fail(secret_id):
        raise RuntimeError("backend unavailable")

    mock_store.callbacks["get_password"] = fail

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", certificate_request(encrypted_pkcs12))

    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_password_lookup_not_found_callback(service, mock_store, encrypted_pkcs12):
    """Test NotFoundError from any backend maps to 404."""

    async def missing(secret_id):
        raise NotFoundError()

    mock_store.callbacks["get_password"] = missing

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate("1234", certificate_request(encrypted_pkcs12))

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_store_certificate_storage_error(service, mock_store, encrypted_pkcs12):
    """Test a failing certificate write is a 500."""

    async def fail(secret_id, value):
        raise RuntimeError("secret payload too large")

    mock_store.callbacks["update_certificate"] = fail

    with pytest.raises(CertificateServiceError) as excinfo:
        await service.store_certificate(
            "1234", certificate_request(encrypted_pkcs12, no_decrypt=True)
        )

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "secret payload too large"
