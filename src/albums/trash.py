"""Trash and provenance transitions.

A file is Active in a regular album, Trashed in the reserved Trash
album, or Purged. Moving a file to Trash pushes its album id onto the
provenance stack; restoring pops it to find the way back.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from albums.album_files import file_index
from albums.ordering import sort_by_name
from albums.results import failure_result
from core.errors import AlbumsError, AlbumsValidationError
from core.logging_config import get_logger
from core.types import FilePlacement, FileRecord, OperationResult

if TYPE_CHECKING:
    from albums.catalog import AlbumCatalog

_LOGGER = get_logger(__name__)


async def remove_from_album(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
    provenance: tuple[str, ...] | None = None,
) -> OperationResult[FilePlacement]:
    """Move a file from an album into Trash.

    Trash is saved before the source album, so a failure between the two
    saves leaves the file reachable from both rather than from neither.

    Args:
        catalog: Owning catalog.
        album_id: Album currently holding the file.
        full_token: Full content token identifying the file.
        provenance: Provenance stack of the file, used to tell copies apart.

    Returns:
        Result holding the file's placement in Trash.
    """
    try:
        await catalog.ready()
        trash = catalog.require_trash_record()
        if album_id == trash.album_id:
            raise AlbumsValidationError(
                "File is already in the Trash album; restore it or remove it forever."
            )
        source_files = await catalog.load_document(album_id)
        index = file_index(source_files, full_token, provenance)
        trash_files = await catalog.load_document(trash.album_id)
        record = source_files.pop(index)
        trashed = replace(record, provenance=push_provenance(record.provenance, album_id))
        trash_files.append(trashed)
        sort_by_name(trash_files)
        await catalog.cascade_album(trash.album_id)
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result(
            "remove_from_album_failed", error, album_id=album_id, full_token=full_token
        )
    _LOGGER.info("file_trashed", album_id=album_id, full_token=full_token)
    return OperationResult.success(FilePlacement(album_id=trash.album_id, record=trashed))


async def restore_to_album(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
    provenance: tuple[str, ...] | None = None,
) -> OperationResult[FilePlacement]:
    """Move a trashed file back to the album it was removed from.

    Args:
        catalog: Owning catalog.
        album_id: Album currently holding the file; must be Trash.
        full_token: Full content token identifying the file.
        provenance: Provenance stack of the file, used to tell copies apart.

    Returns:
        Result holding the file's placement in the restored album.
    """
    try:
        await catalog.ready()
        trash = catalog.require_trash_record()
        if album_id != trash.album_id:
            raise AlbumsValidationError("Only files in the Trash album can be restored.")
        trash_files = await catalog.load_document(trash.album_id)
        index = file_index(trash_files, full_token, provenance)
        record = trash_files[index]
        if not record.provenance:
            raise AlbumsValidationError(
                f"File '{record.name}' has no originating album to restore to."
            )
        target_id = record.provenance[-1]
        catalog.require_record(target_id)
        target_files = await catalog.load_document(target_id)
        del trash_files[index]
        restored = replace(record, provenance=record.provenance[:-1])
        target_files.append(restored)
        sort_by_name(target_files)
        await catalog.cascade_album(target_id)
        await catalog.cascade_album(trash.album_id)
    except AlbumsError as error:
        return failure_result(
            "restore_to_album_failed", error, album_id=album_id, full_token=full_token
        )
    _LOGGER.info("file_restored", album_id=target_id, full_token=full_token)
    return OperationResult.success(FilePlacement(album_id=target_id, record=restored))


async def remove_forever(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
    provenance: tuple[str, ...] | None = None,
) -> OperationResult[FileRecord]:
    """Drop a file from whichever album holds it, Trash included.

    Stored content stays in the content store but is no longer reachable.
    A pinned album thumbnail pointing at the file is left as it is.
    """
    try:
        await catalog.ready()
        files = await catalog.load_document(album_id)
        record = files.pop(file_index(files, full_token, provenance))
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result(
            "remove_forever_failed", error, album_id=album_id, full_token=full_token
        )
    _LOGGER.info("file_purged", album_id=album_id, full_token=full_token)
    return OperationResult.success(record)


def push_provenance(provenance: tuple[str, ...], album_id: str) -> tuple[str, ...]:
    """Push an album id unless it is already on top of the stack."""
    if provenance and provenance[-1] == album_id:
        return provenance
    return provenance + (album_id,)
