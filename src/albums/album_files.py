"""File operations inside one album document.

Every mutation here edits the album's live file list and then runs the
catalog cascade so the change is reachable from the root register.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

from albums.ordering import sort_by_name
from albums.results import failure_result
from core.errors import AlbumsError, AlbumsNotFoundError, AlbumsValidationError
from core.logging_config import get_logger
from core.types import FilePlacement, FileRecord, MediaItem, OperationResult
from media.media_types import is_supported_media_type, resolve_media_type

if TYPE_CHECKING:
    from albums.catalog import AlbumCatalog

_LOGGER = get_logger(__name__)

MediaInput = MediaItem | tuple[bytes, str] | tuple[bytes, str, str | None]


async def add_files(
    catalog: AlbumCatalog,
    album_id: str,
    items: Sequence[MediaInput],
) -> OperationResult[tuple[FileRecord, ...]]:
    """Add media files to an album, cascading after every file.

    Items whose media type is not an image or video are skipped with a
    warning. A store failure on one item is recorded as an error and the
    remaining items are still attempted.

    Args:
        catalog: Owning catalog.
        album_id: Target album id.
        items: ``MediaItem`` values or ``(content, name, media_type)`` tuples.

    Returns:
        Result holding the records that were committed.
    """
    try:
        await catalog.ready()
        media_items = _coerce_items(items)
        if catalog.is_trash(album_id):
            raise AlbumsValidationError("Files cannot be added to the Trash album directly.")
        files = await catalog.load_document(album_id)
    except AlbumsError as error:
        return failure_result("add_files_failed", error, album_id=album_id)

    added: list[FileRecord] = []
    warnings: list[str] = []
    errors: list[str] = []
    for item in media_items:
        media_type = resolve_media_type(item.name, item.media_type)
        if not is_supported_media_type(media_type):
            warnings.append(f"Skipped '{item.name}': unsupported media type '{media_type}'.")
            _LOGGER.warning(
                "file_skipped", album_id=album_id, name=item.name, media_type=media_type
            )
            continue
        try:
            record = await _store_item(catalog, item, media_type)
            files.append(record)
            sort_by_name(files)
            await catalog.cascade_album(album_id)
        except AlbumsError as error:
            errors.append(f"Failed to add '{item.name}': {error}")
            _LOGGER.error("file_add_failed", album_id=album_id, name=item.name, error=str(error))
            continue
        added.append(record)
        _LOGGER.info(
            "file_added", album_id=album_id, name=item.name, full_token=record.full_token
        )
    return OperationResult(value=tuple(added), errors=tuple(errors), warnings=tuple(warnings))


async def set_as_album_thumbnail(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
) -> OperationResult[None]:
    """Pin a file's preview as the album thumbnail.

    The pin survives later mutations, including removal of the file.
    """
    try:
        await catalog.ready()
        files = await catalog.load_document(album_id)
        record = files[file_index(files, full_token)]
        catalog.pin_thumbnail(album_id, record.preview_token)
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result(
            "set_album_thumbnail_failed", error, album_id=album_id, full_token=full_token
        )
    _LOGGER.info("album_thumbnail_pinned", album_id=album_id, full_token=full_token)
    return OperationResult.success()


async def clear_album_thumbnail(catalog: AlbumCatalog, album_id: str) -> OperationResult[None]:
    """Drop a thumbnail pin so the first file's preview is used again."""
    try:
        await catalog.ready()
        catalog.unpin_thumbnail(album_id)
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result("clear_album_thumbnail_failed", error, album_id=album_id)
    return OperationResult.success()


async def delete_thumbnail_for_file(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
) -> OperationResult[None]:
    """Drop the preview rendition reference of one file."""
    try:
        await catalog.ready()
        files = await catalog.load_document(album_id)
        index = file_index(files, full_token)
        files[index] = replace(files[index], preview_token=None)
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result(
            "delete_file_thumbnail_failed", error, album_id=album_id, full_token=full_token
        )
    return OperationResult.success()


async def clear_album(catalog: AlbumCatalog, album_id: str) -> OperationResult[None]:
    """Remove every file from an album without moving them to Trash."""
    try:
        await catalog.ready()
        files = await catalog.load_document(album_id)
        removed = len(files)
        files.clear()
        await catalog.cascade_album(album_id)
    except AlbumsError as error:
        return failure_result("clear_album_failed", error, album_id=album_id)
    _LOGGER.info("album_cleared", album_id=album_id, removed=removed)
    return OperationResult.success()


async def add_to_album(
    catalog: AlbumCatalog,
    album_id: str,
    full_token: str,
    target_album_id: str,
) -> OperationResult[FilePlacement]:
    """Copy a file record into another album.

    The copy reuses the stored content tokens and starts with an empty
    provenance stack. Only the target album is saved.
    """
    try:
        await catalog.ready()
        if target_album_id == album_id:
            raise AlbumsValidationError("A file cannot be copied into the album that holds it.")
        if catalog.is_trash(target_album_id):
            raise AlbumsValidationError(
                "Files cannot be copied into the Trash album; remove them instead."
            )
        files = await catalog.load_document(album_id)
        record = files[file_index(files, full_token)]
        target_files = await catalog.load_document(target_album_id)
        copy = replace(record, provenance=())
        target_files.append(copy)
        sort_by_name(target_files)
        await catalog.cascade_album(target_album_id)
    except AlbumsError as error:
        return failure_result(
            "add_to_album_failed",
            error,
            album_id=album_id,
            target_album_id=target_album_id,
            full_token=full_token,
        )
    _LOGGER.info(
        "file_copied", album_id=album_id, target_album_id=target_album_id, full_token=full_token
    )
    return OperationResult.success(FilePlacement(album_id=target_album_id, record=copy))


def file_index(
    files: list[FileRecord],
    full_token: str,
    provenance: tuple[str, ...] | None = None,
) -> int:
    """Return the position of the first matching file.

    Copies share their full token, so callers holding a record also pass
    its provenance to pick the right copy inside Trash.

    Args:
        files: Album file list.
        full_token: Full content token of the file.
        provenance: Provenance stack the file must carry, or None for any.

    Raises:
        AlbumsNotFoundError: If no file matches.
    """
    for index, record in enumerate(files):
        if record.full_token != full_token:
            continue
        if provenance is None or record.provenance == provenance:
            return index
    raise AlbumsNotFoundError(f"File '{full_token}' not found in album.")


async def _store_item(catalog: AlbumCatalog, item: MediaItem, media_type: str) -> FileRecord:
    full_token = await catalog.content_store.put(item.content)
    preview_token = await _store_rendition(catalog, item, full_token, catalog.preview_size)
    screen_token = await _store_rendition(catalog, item, full_token, catalog.screen_size)
    return FileRecord(
        name=item.name,
        media_type=media_type,
        full_token=full_token,
        preview_token=preview_token,
        screen_token=screen_token,
    )


async def _store_rendition(
    catalog: AlbumCatalog,
    item: MediaItem,
    full_token: str,
    box: tuple[int, int],
) -> str:
    """Store a scaled rendition, reusing the original when resizing fails.

    Any exception raised by the resizer triggers the fallback.
    """
    max_width, max_height = box
    try:
        content = await asyncio.to_thread(
            catalog.resizer.resize, item.content, max_width, max_height
        )
    except Exception as error:
        _LOGGER.warning(
            "rendition_fallback",
            name=item.name,
            box=f"{max_width}x{max_height}",
            error=str(error),
            error_type=type(error).__name__,
        )
        return full_token
    return await catalog.content_store.put(content)


def _coerce_items(items: Sequence[MediaInput]) -> list[MediaItem]:
    """Validate batch input before anything is stored.

    Raises:
        AlbumsValidationError: If the batch or any item is malformed.
    """
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise AlbumsValidationError("Items must be a sequence of (content, name, media_type).")
    return [_coerce_item(item, index) for index, item in enumerate(items)]


def _coerce_item(item: MediaInput, index: int) -> MediaItem:
    if isinstance(item, MediaItem):
        content, name, media_type = item.content, item.name, item.media_type
    elif isinstance(item, (tuple, list)) and len(item) in (2, 3):
        content, name = item[0], item[1]
        media_type = item[2] if len(item) == 3 else None
    else:
        raise AlbumsValidationError(
            f"Item {index} must be a MediaItem or a (content, name, media_type) tuple."
        )
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise AlbumsValidationError(f"Item {index} content must be bytes.")
    if not isinstance(name, str) or not name.strip():
        raise AlbumsValidationError(f"Item {index} name must be a non-empty string.")
    if media_type is not None and not isinstance(media_type, str):
        raise AlbumsValidationError(f"Item {index} media type must be a string.")
    return MediaItem(content=bytes(content), name=name, media_type=media_type)
