"""Public SDK surface for albumvault.

This module provides a stable import path for library users.
It re-exports the catalog, handles, backends and typed models.
"""

from __future__ import annotations

from albums.catalog import AlbumCatalog
from albums.factory import build_catalog
from albums.handles import Album, AlbumFile
from core.config import AlbumsConfig
from core.errors import (
    AlbumsBlobNotFoundError,
    AlbumsError,
    AlbumsMediaError,
    AlbumsNotFoundError,
    AlbumsStoreError,
    AlbumsValidationError,
)
from core.types import AlbumRecord, FileRecord, MediaItem, OperationResult
from media.resize import PillowResizer
from store.content_store import LocalContentStore, MemoryContentStore
from store.root_register import LocalRootRegister, MemoryRootRegister

__all__ = [
    "Album",
    "AlbumCatalog",
    "AlbumFile",
    "AlbumRecord",
    "AlbumsBlobNotFoundError",
    "AlbumsConfig",
    "AlbumsError",
    "AlbumsMediaError",
    "AlbumsNotFoundError",
    "AlbumsStoreError",
    "AlbumsValidationError",
    "FileRecord",
    "LocalContentStore",
    "LocalRootRegister",
    "MediaItem",
    "MemoryContentStore",
    "MemoryRootRegister",
    "OperationResult",
    "PillowResizer",
    "build_catalog",
]
