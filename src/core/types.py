"""Shared typed models.

This module defines immutable data models used by the store, media,
and catalog layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class AlbumRecord:
    """Catalog entry for one album.

    Attributes:
        name: Display name, not required to be unique.
        album_id: Stable identifier, never reassigned.
        current_token: Content store token of the latest album document.
        thumb_token: Content store token of the album thumbnail.
        thumb_pinned: Whether the thumbnail was chosen explicitly.
    """

    name: str
    album_id: str
    current_token: str
    thumb_token: str | None = None
    thumb_pinned: bool = False


@dataclass(frozen=True)
class FileRecord:
    """Album document entry for one media file.

    Attributes:
        name: File name used for ordering.
        media_type: Resolved MIME type.
        full_token: Token of the original content.
        preview_token: Token of the small preview rendition.
        screen_token: Token of the medium screen rendition.
        provenance: Album ids the file was removed from, most recent last.
    """

    name: str
    media_type: str
    full_token: str
    preview_token: str | None = None
    screen_token: str | None = None
    provenance: tuple[str, ...] = ()


@dataclass(frozen=True)
class MediaItem:
    """One input item for a batch add.

    Attributes:
        content: Raw media bytes.
        name: File name.
        media_type: Optional MIME type; inferred from the name when absent.
    """

    content: bytes
    name: str
    media_type: str | None = None


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Uniform outcome of a mutating catalog operation.

    Attributes:
        value: Operation payload on success.
        errors: Hard failures; non-empty means the operation failed.
        warnings: Soft issues such as skipped batch items.
    """

    value: T | None = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when no hard failure was recorded."""
        return not self.errors

    @classmethod
    def success(
        cls,
        value: T | None = None,
        warnings: tuple[str, ...] = (),
    ) -> "OperationResult[T]":
        """Build a successful result."""
        return cls(value=value, warnings=warnings)

    @classmethod
    def failure(
        cls,
        message: str,
        warnings: tuple[str, ...] = (),
    ) -> "OperationResult[T]":
        """Build a failed result carrying one error message."""
        return cls(errors=(message,), warnings=warnings)


@dataclass(frozen=True)
class FilePlacement:
    """A file record together with the album that now holds it.

    Attributes:
        album_id: Id of the album holding the record.
        record: The file record as stored.
    """

    album_id: str
    record: FileRecord
