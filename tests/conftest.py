"""Global pytest configuration and fixtures for all tests."""

import datetime
import os
from collections.abc import Awaitable, Callable

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    pkcs12,
)
from cryptography.x509.oid import NameOID

from courier.config import Settings
from courier.infrastructure.repositories import CertificateStore, NotFoundError

PKCS12_PASSWORD = "supersecretsquirrel"


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Tests build their own Settings; these only keep the environment of the
    machine running the tests from leaking into the cached settings.
    """
    original_env = {}

    test_env_vars = {
        "COURIER_MODE": "test",
        "COURIER_CONSOLE_LOG": "true",
        "COURIER_LOG_LEVEL": "DEBUG",
        "COURIER_MAINTENANCE": "false",
        "COURIER_OTEL_ENABLED": "false",
    }

    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


# ===========================
# Settings
# ===========================


@pytest.fixture
def local_settings(tmp_path) -> Settings:
    """Valid settings using local storage in a temporary directory."""
    return Settings(
        mode="test",
        bind_addr="127.0.0.1:8842",
        local_storage_enabled=True,
        local_storage_path=str(tmp_path / "courier"),
        _env_file=None,
    )


# ===========================
# PKCS#12 fixtures
# ===========================


@pytest.fixture(scope="session")
def pkcs12_password() -> str:
    """Password protecting the encrypted_pkcs12 fixture."""
    return PKCS12_PASSWORD


@pytest.fixture(scope="session")
def certificate_bundle() -> tuple[ec.EllipticCurvePrivateKey, x509.Certificate]:
    """A private key and a self-signed certificate."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "courier.test")])
    now = datetime.datetime.now(datetime.timezone.utc)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return key, cert


@pytest.fixture(scope="session")
def encrypted_pkcs12(certificate_bundle) -> bytes:
    """PKCS#12 bundle protected by PKCS12_PASSWORD."""
    key, cert = certificate_bundle
    return pkcs12.serialize_key_and_certificates(
        name=b"courier.test",
        key=key,
        cert=cert,
        cas=None,
        encryption_algorithm=BestAvailableEncryption(PKCS12_PASSWORD.encode()),
    )


# ===========================
# Mock store
# ===========================


class MockStore(CertificateStore):
    """
    In-memory CertificateStore that records calls.

    Any operation can be overridden with an async callback, e.g. to make
    update_certificate raise.
    """

    def __init__(self) -> None:
        self.passwords: dict[str, bytes] = {}
        self.certificates: dict[str, bytes] = {}
        self.calls: dict[str, int] = {}
        self.callbacks: dict[str, Callable[..., Awaitable]] = {}
        self.closed = False

    async def _get(self, name: str, data: dict[str, bytes], secret_id: str) -> bytes:
        self.calls[name] = self.calls.get(name, 0) + 1
        if name in self.callbacks:
            return await self.callbacks[name](secret_id)
        try:
            return data[secret_id]
        except KeyError:
            raise NotFoundError() from None

    async def _update(
        self, name: str, data: dict[str, bytes], secret_id: str, value: bytes
    ) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        if name in self.callbacks:
            await self.callbacks[name](secret_id, value)
            return
        data[secret_id] = value

    async def get_password(self, secret_id: str) -> bytes:
        return await self._get("get_password", self.passwords, secret_id)

    async def update_password(self, secret_id: str, password: bytes) -> None:
        await self._update("update_password", self.passwords, secret_id, password)

    async def get_certificate(self, secret_id: str) -> bytes:
        return await self._get("get_certificate", self.certificates, secret_id)

    async def update_certificate(self, secret_id: str, certificate: bytes) -> None:
        await self._update(
            "update_certificate", self.certificates, secret_id, certificate
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mock_store() -> MockStore:
    """Empty in-memory store."""
    return MockStore()
