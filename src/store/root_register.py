"""Root register implementations.

The root register is the one mutable value in the system: a single
short string holding the token of the current catalog blob.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Protocol

from core.constants import ROOT_REGISTER_FILE_NAME
from core.errors import AlbumsStoreError


class RootRegister(Protocol):
    """Single mutable string slot."""

    async def read(self) -> str:
        """Return the stored value, empty when unset."""
        ...

    async def write(self, value: str) -> None:
        """Replace the stored value."""
        ...


class MemoryRootRegister:
    """In-memory root register."""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.write_count = 0

    async def read(self) -> str:
        return self.value

    async def write(self, value: str) -> None:
        self.value = value
        self.write_count += 1


class LocalRootRegister:
    """Root register persisted as a small text file."""

    def __init__(self, data_root: Path) -> None:
        """Initialize register file location.

        Args:
            data_root: Directory holding the register file.
        """
        self._path = data_root / ROOT_REGISTER_FILE_NAME

    async def read(self) -> str:
        """Read the register file.

        Returns:
            Stored token, or empty string when the file does not exist.

        Raises:
            AlbumsStoreError: If the file exists but cannot be read.
        """
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as error:
            raise AlbumsStoreError(
                f"Failed to read root register at {self._path}: {error}."
            ) from error
        return text.strip()

    async def write(self, value: str) -> None:
        """Atomically replace the register file.

        Args:
            value: New register content.

        Raises:
            AlbumsStoreError: If the file cannot be written.
        """
        try:
            await asyncio.to_thread(_atomic_write_text, self._path, value)
        except OSError as error:
            raise AlbumsStoreError(
                f"Failed to write root register at {self._path}: {error}. "
                "Check permissions under the data root."
            ) from error


def _atomic_write_text(path: Path, data: str) -> None:
    """Write text to a temp file then swap it into place."""
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with tmp_path.open("w", encoding="utf-8") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    tmp_path.replace(path)
