"""Backend selection from runtime configuration."""

from __future__ import annotations

from core.config import AlbumsConfig
from core.errors import AlbumsConfigError
from store.content_store import ContentStore, LocalContentStore, MemoryContentStore
from store.root_register import LocalRootRegister, MemoryRootRegister, RootRegister
from store.s3_backend import S3ContentStore, S3RootRegister, create_s3_client


def build_backends(config: AlbumsConfig) -> tuple[ContentStore, RootRegister]:
    """Create the content store and root register for a config.

    Args:
        config: Runtime configuration.

    Returns:
        Pair of content store and root register.

    Raises:
        AlbumsConfigError: If the S3 backend is selected without a location.
    """
    if config.backend == "memory":
        return MemoryContentStore(), MemoryRootRegister()
    if config.backend == "s3":
        if config.s3_location is None:
            raise AlbumsConfigError(
                "The S3 backend requires an S3 location. Set ALBUMS_S3_URI=s3://bucket/prefix."
            )
        s3_client = create_s3_client(config)
        return (
            S3ContentStore(s3_client, config.s3_location),
            S3RootRegister(s3_client, config.s3_location),
        )
    config.data_root.mkdir(parents=True, exist_ok=True)
    return LocalContentStore(config.data_root), LocalRootRegister(config.data_root)
