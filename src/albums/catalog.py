"""Album catalog and cascade save protocol.

This module owns the in-memory catalog, its bootstrap from the root
register, and the bottom-up cascade that makes every album document
change reachable from the root:

    album document -> put -> catalog entry -> put catalog -> root register

Operations are expected to run one at a time. Two mutations in flight
at once race on ``save_catalog`` and the last write wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

from albums.codec import decode_album, decode_catalog, encode_album, encode_catalog
from albums.handles import Album
from albums.identifiers import AlbumIdGenerator
from albums.ordering import sort_by_name
from albums.results import failure_result
from core.constants import DEFAULT_PREVIEW_SIZE, DEFAULT_SCREEN_SIZE, TRASH_ALBUM_NAME
from core.errors import (
    AlbumsBlobNotFoundError,
    AlbumsError,
    AlbumsNotFoundError,
    AlbumsStoreError,
    AlbumsValidationError,
)
from core.logging_config import get_logger
from core.types import AlbumRecord, FileRecord, OperationResult
from media.resize import PillowResizer, Resizer
from store.content_store import ContentStore
from store.root_register import RootRegister

_LOGGER = get_logger(__name__)


class AlbumCatalog:
    """Sorted catalog of albums persisted through a root register.

    The catalog bootstraps lazily: every public operation first awaits
    ``ready()``, which loads the catalog referenced by the root register
    (or creates an empty one) and guarantees the Trash album exists.
    """

    def __init__(
        self,
        content_store: ContentStore,
        root_register: RootRegister,
        resizer: Resizer | None = None,
        *,
        preview_size: tuple[int, int] = DEFAULT_PREVIEW_SIZE,
        screen_size: tuple[int, int] = DEFAULT_SCREEN_SIZE,
        id_generator: AlbumIdGenerator | None = None,
    ) -> None:
        """Create a catalog over injected backends.

        Args:
            content_store: Immutable blob store.
            root_register: Mutable register holding the catalog token.
            resizer: Rendition generator; Pillow when omitted.
            preview_size: Bounding box for file previews.
            screen_size: Bounding box for screen renditions.
            id_generator: Album id source.
        """
        self._store = content_store
        self._register = root_register
        self._resizer = resizer or PillowResizer()
        self._preview_size = preview_size
        self._screen_size = screen_size
        self._ids = id_generator or AlbumIdGenerator()
        self._records: list[AlbumRecord] = []
        self._documents: dict[str, list[FileRecord]] = {}
        self._root_token: str | None = None
        self._ready_task: asyncio.Task[None] | None = None
        self._needs_save = False

    @property
    def content_store(self) -> ContentStore:
        return self._store

    @property
    def resizer(self) -> Resizer:
        return self._resizer

    @property
    def preview_size(self) -> tuple[int, int]:
        return self._preview_size

    @property
    def screen_size(self) -> tuple[int, int]:
        return self._screen_size

    @property
    def root_token(self) -> str | None:
        """Return the token of the last catalog blob written or loaded."""
        return self._root_token

    async def ready(self) -> None:
        """Wait for bootstrap to finish, starting it on first call.

        A failed bootstrap is retried on the next call.

        Raises:
            AlbumsStoreError: If the root register or content store fails.
        """
        if self._ready_task is None:
            self._ready_task = asyncio.create_task(self._bootstrap())
        task = self._ready_task
        try:
            await task
        except Exception:
            if self._ready_task is task:
                self._ready_task = None
            raise

    async def reload(self) -> None:
        """Drop in-memory state and bootstrap again from the root register."""
        self._records = []
        self._documents = {}
        self._root_token = None
        self._needs_save = False
        self._ready_task = None
        await self.ready()

    async def save_catalog(self) -> str:
        """Persist the catalog and point the root register at it.

        Returns:
            Token of the new catalog blob.
        """
        await self.ready()
        return await self._save_catalog()

    async def get_albums(self) -> tuple[AlbumRecord, ...]:
        """Return a snapshot of catalog records in catalog order."""
        await self.ready()
        return tuple(self._records)

    async def album(self, album_id: str) -> Album:
        """Return a handle for an album id.

        Raises:
            AlbumsNotFoundError: If no album has this id.
        """
        await self.ready()
        self.require_record(album_id)
        return Album(self, album_id)

    async def trash(self) -> Album:
        """Return a handle for the Trash album."""
        await self.ready()
        return Album(self, self.require_trash_record().album_id)

    async def find_album_by_id(self, album_id: str) -> Album | None:
        """Return a handle for an album id, or None when it is unknown."""
        await self.ready()
        return Album(self, album_id) if self._find_index(album_id) is not None else None

    async def find_album_by_name(self, name: str) -> Album | None:
        """Return the first album with this name in catalog order."""
        await self.ready()
        for record in self._records:
            if record.name == name:
                return Album(self, record.album_id)
        return None

    async def find_album_by_token(self, token: str) -> Album | None:
        """Return the album whose current document token matches."""
        await self.ready()
        for record in self._records:
            if record.current_token == token:
                return Album(self, record.album_id)
        return None

    async def create_album(self, name: str) -> OperationResult[Album]:
        """Create an empty album.

        Args:
            name: Non-empty display name; duplicates are allowed.

        Returns:
            Result holding the new album handle.
        """
        try:
            await self.ready()
            _validate_album_name(name)
            token = await self._store.put(encode_album([]))
            album_id = self._ids.new_id()
            self._records.append(AlbumRecord(name=name, album_id=album_id, current_token=token))
            self._documents[album_id] = []
            sort_by_name(self._records)
            await self._save_catalog()
        except AlbumsError as error:
            return failure_result("create_album_failed", error, name=name)
        _LOGGER.info("album_created", album_id=album_id, name=name)
        return OperationResult.success(Album(self, album_id))

    async def delete_album(self, album_id: str) -> OperationResult[None]:
        """Remove an album from the catalog.

        The album's files become unreachable; they are not moved to Trash.
        The Trash album itself cannot be deleted.
        """
        try:
            await self.ready()
            index = self._index_of(album_id)
            record = self._records[index]
            if record.name == TRASH_ALBUM_NAME:
                raise AlbumsValidationError("The Trash album cannot be deleted.")
            del self._records[index]
            self._documents.pop(album_id, None)
            await self._save_catalog()
        except AlbumsError as error:
            return failure_result("delete_album_failed", error, album_id=album_id)
        _LOGGER.info("album_deleted", album_id=album_id, name=record.name)
        return OperationResult.success()

    async def delete_all_albums(self, clear_trash: bool = False) -> OperationResult[None]:
        """Reduce the catalog to the Trash album.

        Args:
            clear_trash: Also empty the Trash album.
        """
        try:
            await self.ready()
            trash = self.require_trash_record()
            trash_files = self._documents.get(trash.album_id)
            if clear_trash:
                token = await self._store.put(encode_album([]))
                trash = replace(trash, current_token=token, thumb_token=None, thumb_pinned=False)
                trash_files = []
            self._records = [trash]
            self._documents = {} if trash_files is None else {trash.album_id: trash_files}
            await self._save_catalog()
        except AlbumsError as error:
            return failure_result("delete_all_albums_failed", error, clear_trash=clear_trash)
        _LOGGER.info("all_albums_deleted", clear_trash=clear_trash)
        return OperationResult.success()

    def require_record(self, album_id: str) -> AlbumRecord:
        """Return the catalog record for an album id.

        Raises:
            AlbumsNotFoundError: If no album has this id.
        """
        return self._records[self._index_of(album_id)]

    def require_trash_record(self) -> AlbumRecord:
        """Return the Trash record.

        Raises:
            AlbumsNotFoundError: If the catalog has no Trash album.
        """
        for record in self._records:
            if record.name == TRASH_ALBUM_NAME:
                return record
        raise AlbumsNotFoundError("Trash album is missing from the catalog.")

    def is_trash(self, album_id: str) -> bool:
        return self.require_record(album_id).name == TRASH_ALBUM_NAME

    async def load_document(self, album_id: str) -> list[FileRecord]:
        """Return the live, sorted file list of an album.

        The list is cached and mutated in place by album operations.

        Raises:
            AlbumsNotFoundError: If no album has this id.
            AlbumsStoreError: If the document cannot be read or is corrupt.
        """
        record = self.require_record(album_id)
        files = self._documents.get(album_id)
        if files is not None:
            return files
        content = await self._store.get(record.current_token)
        try:
            files = decode_album(content)
        except AlbumsValidationError as error:
            raise AlbumsStoreError(
                f"Album document {record.current_token} of album '{record.name}' is corrupt: "
                f"{error}"
            ) from error
        sort_by_name(files)
        self._documents[album_id] = files
        return files

    async def cascade_album(self, album_id: str) -> None:
        """Store an album document and propagate its token to the root.

        The album thumbnail is re-derived from the first file unless it is
        pinned.

        Raises:
            AlbumsNotFoundError: If the album left the catalog.
            AlbumsStoreError: If any put or the register write fails.
        """
        files = await self.load_document(album_id)
        token = await self._store.put(encode_album(files))
        _LOGGER.info(
            "album_document_saved", album_id=album_id, token=token, file_count=len(files)
        )
        index = self._index_of(album_id)
        record = self._records[index]
        thumb_token = record.thumb_token if record.thumb_pinned else derive_thumb_token(files)
        self._records[index] = replace(record, current_token=token, thumb_token=thumb_token)
        sort_by_name(self._records)
        await self._save_catalog()

    def pin_thumbnail(self, album_id: str, thumb_token: str | None) -> None:
        index = self._index_of(album_id)
        self._records[index] = replace(
            self._records[index], thumb_token=thumb_token, thumb_pinned=True
        )

    def unpin_thumbnail(self, album_id: str) -> None:
        index = self._index_of(album_id)
        self._records[index] = replace(self._records[index], thumb_pinned=False)

    async def _bootstrap(self) -> None:
        token = (await self._register.read()).strip()
        if not token:
            await self._create_empty_catalog()
        else:
            try:
                await self._load_catalog(token)
            except (AlbumsValidationError, AlbumsBlobNotFoundError) as error:
                _LOGGER.warning("catalog_load_failed", token=token, error=str(error))
                await self._create_empty_catalog()
        await self._ensure_trash()

    async def _create_empty_catalog(self) -> None:
        self._records = []
        self._documents = {}
        await self._save_catalog()
        _LOGGER.info("catalog_created", token=self._root_token)

    async def _load_catalog(self, token: str) -> None:
        content = await self._store.get(token)
        records, assigned = decode_catalog(content, self._ids.new_id)
        renamed = _rename_extra_trash(records)
        sort_by_name(records)
        self._records = records
        self._documents = {}
        self._root_token = token
        self._needs_save = assigned > 0 or renamed > 0
        if assigned:
            _LOGGER.info("catalog_migrated", assigned_ids=assigned)
        if renamed:
            _LOGGER.warning("duplicate_trash_renamed", renamed=renamed)
        _LOGGER.info("catalog_loaded", token=token, album_count=len(records))

    async def _ensure_trash(self) -> None:
        if any(record.name == TRASH_ALBUM_NAME for record in self._records):
            if self._needs_save:
                await self._save_catalog()
            return
        token = await self._store.put(encode_album([]))
        trash = AlbumRecord(
            name=TRASH_ALBUM_NAME, album_id=self._ids.new_id(), current_token=token
        )
        self._records.append(trash)
        self._documents[trash.album_id] = []
        sort_by_name(self._records)
        await self._save_catalog()
        _LOGGER.info("trash_album_created", album_id=trash.album_id)

    async def _save_catalog(self) -> str:
        token = await self._store.put(encode_catalog(self._records))
        await self._register.write(token)
        self._root_token = token
        self._needs_save = False
        _LOGGER.info("catalog_saved", token=token, album_count=len(self._records))
        return token

    def _find_index(self, album_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.album_id == album_id:
                return index
        return None

    def _index_of(self, album_id: str) -> int:
        index = self._find_index(album_id)
        if index is None:
            raise AlbumsNotFoundError(f"Album '{album_id}' not found in the catalog.")
        return index


def derive_thumb_token(files: list[FileRecord]) -> str | None:
    """Return the preview token of the first file, if any."""
    return files[0].preview_token if files else None


def _validate_album_name(name: object) -> None:
    if not isinstance(name, str) or not name.strip():
        raise AlbumsValidationError("Album name must be a non-empty string.")
    if name == TRASH_ALBUM_NAME:
        raise AlbumsValidationError(f"'{TRASH_ALBUM_NAME}' is a reserved album name.")


def _rename_extra_trash(records: list[AlbumRecord]) -> int:
    """Keep the first Trash record and rename any later ones.

    Returns:
        Number of records renamed.
    """
    taken = {record.name for record in records}
    renamed = 0
    seen_trash = False
    for index, record in enumerate(records):
        if record.name != TRASH_ALBUM_NAME:
            continue
        if not seen_trash:
            seen_trash = True
            continue
        suffix = 2
        while f"{TRASH_ALBUM_NAME} ({suffix})" in taken:
            suffix += 1
        name = f"{TRASH_ALBUM_NAME} ({suffix})"
        taken.add(name)
        records[index] = replace(record, name=name)
        renamed += 1
    return renamed
