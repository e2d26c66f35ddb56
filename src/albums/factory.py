"""Catalog construction from runtime configuration."""

from __future__ import annotations

from albums.catalog import AlbumCatalog
from core.config import AlbumsConfig
from media.resize import PillowResizer
from store.backends import build_backends


def build_catalog(config: AlbumsConfig | None = None) -> AlbumCatalog:
    """Create a catalog wired to the configured backends.

    Args:
        config: Optional runtime configuration; read from env when omitted.

    Returns:
        Catalog instance; call ``ready()`` or any operation to bootstrap it.
    """
    resolved = config or AlbumsConfig.from_env()
    content_store, root_register = build_backends(resolved)
    return AlbumCatalog(
        content_store,
        root_register,
        PillowResizer(),
        preview_size=resolved.preview_size,
        screen_size=resolved.screen_size,
    )
