"""Album and file handles.

Handles are thin views keyed by album id and full content token. They
hold no file state of their own; every call goes through the catalog,
so a handle never serves a stale document.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from albums import album_files, trash
from core.types import AlbumRecord, FilePlacement, FileRecord, OperationResult

if TYPE_CHECKING:
    from albums.album_files import MediaInput
    from albums.catalog import AlbumCatalog


class Album:
    """Handle for one album of a catalog."""

    def __init__(self, catalog: AlbumCatalog, album_id: str) -> None:
        """Create album handle.

        Args:
            catalog: Owning catalog.
            album_id: Stable album identifier.
        """
        self._catalog = catalog
        self._album_id = album_id

    def __repr__(self) -> str:
        return f"Album(album_id={self._album_id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Album):
            return NotImplemented
        return self._catalog is other._catalog and self._album_id == other._album_id

    def __hash__(self) -> int:
        return hash(self._album_id)

    @property
    def catalog(self) -> AlbumCatalog:
        return self._catalog

    @property
    def album_id(self) -> str:
        return self._album_id

    @property
    def record(self) -> AlbumRecord:
        """Return the current catalog record.

        Raises:
            AlbumsNotFoundError: If the album was deleted.
        """
        return self._catalog.require_record(self._album_id)

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def is_trash(self) -> bool:
        return self._catalog.is_trash(self._album_id)

    async def get_files(self) -> tuple[FileRecord, ...]:
        """Return a snapshot of the album's files in name order."""
        await self._catalog.ready()
        return tuple(await self._catalog.load_document(self._album_id))

    async def find_file_by_full_token(self, full_token: str) -> AlbumFile | None:
        """Return the first file with this full content token."""
        for record in await self.get_files():
            if record.full_token == full_token:
                return AlbumFile(self, record)
        return None

    async def find_file_by_name(self, name: str) -> AlbumFile | None:
        """Return the first file with this name in album order."""
        for record in await self.get_files():
            if record.name == name:
                return AlbumFile(self, record)
        return None

    async def add_files(
        self,
        items: Sequence[MediaInput],
    ) -> OperationResult[tuple[FileRecord, ...]]:
        """Add media files, cascading after each one.

        Args:
            items: ``MediaItem`` values or ``(content, name, media_type)`` tuples.

        Returns:
            Result with committed records and warnings for skipped items.
        """
        return await album_files.add_files(self._catalog, self._album_id, items)

    async def clear(self) -> OperationResult[None]:
        """Remove every file from the album without moving them to Trash."""
        return await album_files.clear_album(self._catalog, self._album_id)

    async def clear_thumbnail(self) -> OperationResult[None]:
        """Unpin the album thumbnail so it follows the first file again."""
        return await album_files.clear_album_thumbnail(self._catalog, self._album_id)

    async def delete_thumbnail_for_file(self, full_token: str) -> OperationResult[None]:
        """Drop the preview rendition reference of one file."""
        return await album_files.delete_thumbnail_for_file(
            self._catalog, self._album_id, full_token
        )

    async def delete(self) -> OperationResult[None]:
        """Remove the album from the catalog; its files are not trashed."""
        return await self._catalog.delete_album(self._album_id)


class AlbumFile:
    """Handle for one file record inside an album."""

    def __init__(self, album: Album, record: FileRecord) -> None:
        """Create file handle.

        Args:
            album: Album holding the file.
            record: File record snapshot.
        """
        self._album = album
        self._record = record

    def __repr__(self) -> str:
        return (
            f"AlbumFile(album_id={self._album.album_id!r}, "
            f"full_token={self._record.full_token!r})"
        )

    @property
    def album(self) -> Album:
        return self._album

    @property
    def record(self) -> FileRecord:
        return self._record

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def full_token(self) -> str:
        return self._record.full_token

    async def read_full(self) -> bytes:
        return await self._album.catalog.content_store.get(self._record.full_token)

    async def read_preview(self) -> bytes | None:
        """Return preview content, or None when the file has no preview."""
        if not self._record.preview_token:
            return None
        return await self._album.catalog.content_store.get(self._record.preview_token)

    async def read_screen(self) -> bytes | None:
        """Return screen rendition content, or None when absent."""
        if not self._record.screen_token:
            return None
        return await self._album.catalog.content_store.get(self._record.screen_token)

    async def set_as_album_thumbnail(self) -> OperationResult[None]:
        """Pin this file's preview as the album thumbnail."""
        return await album_files.set_as_album_thumbnail(
            self._album.catalog, self._album.album_id, self.full_token
        )

    async def remove_from_album(self) -> OperationResult[AlbumFile]:
        """Move the file into Trash.

        Returns:
            Result holding a handle to the file inside Trash.
        """
        result = await trash.remove_from_album(
            self._album.catalog,
            self._album.album_id,
            self.full_token,
            provenance=self._record.provenance,
        )
        return self._placed(result)

    async def restore_to_album(self) -> OperationResult[AlbumFile]:
        """Move a trashed file back to the album it came from.

        Returns:
            Result holding a handle to the file in the restored album.
        """
        result = await trash.restore_to_album(
            self._album.catalog,
            self._album.album_id,
            self.full_token,
            provenance=self._record.provenance,
        )
        return self._placed(result)

    async def remove_forever(self) -> OperationResult[None]:
        """Drop the file from its album without passing through Trash."""
        result = await trash.remove_forever(
            self._album.catalog,
            self._album.album_id,
            self.full_token,
            provenance=self._record.provenance,
        )
        return OperationResult(errors=result.errors, warnings=result.warnings)

    async def add_to_album(self, target_album_id: str) -> OperationResult[AlbumFile]:
        """Copy the file into another album, reusing its stored content."""
        result = await album_files.add_to_album(
            self._album.catalog, self._album.album_id, self.full_token, target_album_id
        )
        return self._placed(result)

    def _placed(self, result: OperationResult[FilePlacement]) -> OperationResult[AlbumFile]:
        if result.value is None:
            return OperationResult(errors=result.errors, warnings=result.warnings)
        placement = result.value
        album = Album(self._album.catalog, placement.album_id)
        return OperationResult(
            value=AlbumFile(album, placement.record),
            errors=result.errors,
            warnings=result.warnings,
        )
