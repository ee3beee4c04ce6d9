"""
Local file-based certificate store.

Each secret is kept as a single gzip stream in the configured directory:
    {base_dir}/
        password-{id}.gz
        certificate-{id}.gz

Archives are built in memory and moved into place with an atomic rename, so a
reader never observes a partially written file.
"""

import asyncio
import gzip
import os
import tempfile
from pathlib import Path

from loguru import logger

from courier.core.locks import ReadWriteLock
from courier.infrastructure.repositories.store import (
    CertificateStore,
    NotFoundError,
    SecretKind,
    storage_key,
)

ARCHIVE_EXTENSION = ".gz"


class LocalStore(CertificateStore):
    """
    Gzip archive per secret in a local directory.

    A single reader/writer lock guards all filesystem access of this
    instance: reads run concurrently, a write excludes everything else.
    """

    def __init__(self, base_dir: str):
        """
        Open the local store, creating the directory if needed.

        Args:
            base_dir: Directory holding the archives
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = ReadWriteLock()

        logger.info(f"Initialized LocalStore at {self.base_dir}")

    async def get_password(self, secret_id: str) -> bytes:
        return await self._load(SecretKind.PASSWORD, secret_id)

    async def update_password(self, secret_id: str, password: bytes) -> None:
        await self._store(SecretKind.PASSWORD, secret_id, password)

    async def get_certificate(self, secret_id: str) -> bytes:
        return await self._load(SecretKind.CERTIFICATE, secret_id)

    async def update_certificate(self, secret_id: str, certificate: bytes) -> None:
        await self._store(SecretKind.CERTIFICATE, secret_id, certificate)

    async def close(self) -> None:
        """Nothing to release; archives are opened per call."""

    # ========================================================================
    # Helpers
    # ========================================================================

    def _archive_path(self, kind: SecretKind, secret_id: str) -> Path:
        """Get path to the archive holding a secret."""
        return self.base_dir / f"{storage_key(kind, secret_id)}{ARCHIVE_EXTENSION}"

    async def _load(self, kind: SecretKind, secret_id: str) -> bytes:
        path = self._archive_path(kind, secret_id)
        async with self._lock.read():
            return await asyncio.to_thread(_read_archive, path)

    async def _store(self, kind: SecretKind, secret_id: str, data: bytes) -> None:
        path = self._archive_path(kind, secret_id)
        archive = gzip.compress(data)
        async with self._lock.write():
            replace = asyncio.ensure_future(asyncio.to_thread(_replace_file, path, archive))
            try:
                await asyncio.shield(replace)
            except asyncio.CancelledError:
                # The rename cannot be interrupted; keep the lock until it lands
                await asyncio.wait({replace})
                if not replace.cancelled() and replace.exception() is not None:
                    logger.warning(
                        f"Cancelled write of {path.name} failed: {replace.exception()}"
                    )
                raise
        logger.debug(f"Stored {kind.value} archive for {secret_id}")


def _read_archive(path: Path) -> bytes:
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise NotFoundError(f"{path.name} not found") from None

    # An empty file is an archive without a payload
    if not raw:
        raise NotFoundError(f"{path.name} is empty")

    return gzip.decompress(raw)


def _replace_file(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
