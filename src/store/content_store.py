"""Blob content stores.

This module defines the put/get capability the catalog is built on,
plus in-memory and local filesystem implementations. Stores offer no
delete or listing; every put yields a fresh opaque token.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from core.constants import BLOBS_DIR_NAME
from core.errors import AlbumsBlobNotFoundError, AlbumsStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class ContentStore(Protocol):
    """Immutable blob store capability."""

    async def put(self, content: bytes) -> str:
        """Store content and return an opaque token."""
        ...

    async def get(self, token: str) -> bytes:
        """Return content previously stored under token."""
        ...


def new_token() -> str:
    """Return a fresh random blob token."""
    return uuid4().hex


class MemoryContentStore:
    """Token-indexed in-memory blob arena."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    async def put(self, content: bytes) -> str:
        """Store content and return a fresh token.

        Args:
            content: Blob bytes.

        Returns:
            New token.
        """
        token = new_token()
        self._blobs[token] = bytes(content)
        return token

    async def get(self, token: str) -> bytes:
        """Return stored content.

        Args:
            token: Token returned by ``put``.

        Returns:
            Stored bytes.

        Raises:
            AlbumsBlobNotFoundError: If token is unknown.
        """
        try:
            return self._blobs[token]
        except KeyError as error:
            raise AlbumsBlobNotFoundError(f"Unknown content token '{token}'.") from error


class LocalContentStore:
    """Filesystem blob store.

    Layout: ``{data_root}/blobs/{token[:2]}/{token}``.
    """

    def __init__(self, data_root: Path) -> None:
        """Initialize local store under a data root.

        Args:
            data_root: Directory holding the ``blobs`` tree.
        """
        self._blobs_root = data_root / BLOBS_DIR_NAME
        self._blobs_root.mkdir(parents=True, exist_ok=True)

    async def put(self, content: bytes) -> str:
        """Write content to a new blob file.

        Args:
            content: Blob bytes.

        Returns:
            New token.

        Raises:
            AlbumsStoreError: If the file cannot be written.
        """
        token = new_token()
        path = self._blob_path(token)
        try:
            await asyncio.to_thread(_write_blob, path, content)
        except OSError as error:
            raise AlbumsStoreError(
                f"Failed to write blob {token} at {path}: {error}. "
                "Check free space and permissions under the data root."
            ) from error
        _LOGGER.debug("blob_written", token=token, size=len(content))
        return token

    async def get(self, token: str) -> bytes:
        """Read blob content.

        Args:
            token: Token returned by ``put``.

        Returns:
            Stored bytes.

        Raises:
            AlbumsBlobNotFoundError: If no blob exists for token.
            AlbumsStoreError: If the blob is unreadable.
        """
        if not token or "/" in token or token.startswith("."):
            raise AlbumsBlobNotFoundError(f"Invalid content token '{token}'.")
        path = self._blob_path(token)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as error:
            raise AlbumsBlobNotFoundError(f"Unknown content token '{token}'.") from error
        except OSError as error:
            raise AlbumsStoreError(f"Failed to read blob {token} at {path}: {error}.") from error

    def _blob_path(self, token: str) -> Path:
        return self._blobs_root / token[:2] / token


def _write_blob(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
