"""
PKCS#12 certificate container handling.

Certificates arrive as password protected PKCS#12 bundles. The courier
decrypts them with the stored password and re-encodes the contents without
encryption so that consumers of the store do not need the password.
"""

from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    NoEncryption,
    pkcs12,
)

Bundle = pkcs12.PKCS12KeyAndCertificates


class DecryptionError(ValueError):
    """The bundle is malformed or the password is wrong."""


def decrypt(data: bytes, password: str | bytes) -> Bundle:
    """
    Decrypt a PKCS#12 bundle.

    Args:
        data: Raw PKCS#12 bytes
        password: Password protecting the bundle

    Returns:
        Private key, certificate and chain held by the bundle

    Raises:
        DecryptionError: If the data is not PKCS#12 or the password is wrong
    """
    if isinstance(password, str):
        password = password.encode("utf-8")

    try:
        return pkcs12.load_pkcs12(data, password or None)
    except (ValueError, TypeError) as e:
        raise DecryptionError(f"could not decrypt pkcs12 data: {e}") from e


def _serialize(bundle: Bundle, encryption) -> bytes:
    name = bundle.cert.friendly_name if bundle.cert is not None else None
    cas = [extra.certificate for extra in bundle.additional_certs] or None
    return pkcs12.serialize_key_and_certificates(
        name=name,
        key=bundle.key,
        cert=bundle.cert.certificate if bundle.cert is not None else None,
        cas=cas,
        encryption_algorithm=encryption,
    )


def encode(bundle: Bundle) -> bytes:
    """Re-encode decrypted contents as an unencrypted PKCS#12 bundle."""
    return _serialize(bundle, NoEncryption())


def encrypt(bundle: Bundle, password: str | bytes) -> bytes:
    """Encode contents as a PKCS#12 bundle protected by password."""
    if isinstance(password, str):
        password = password.encode("utf-8")
    return _serialize(bundle, BestAvailableEncryption(password))
