"""albumvault exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class AlbumsError(Exception):
    """Base exception for all albumvault failures."""


class AlbumsConfigError(AlbumsError):
    """Raised for invalid runtime configuration."""


class AlbumsValidationError(AlbumsError):
    """Raised for malformed input to a public call."""


class AlbumsNotFoundError(AlbumsError):
    """Raised when a referenced album or file does not exist."""


class AlbumsStoreError(AlbumsError):
    """Raised for content store and root register failures."""


class AlbumsMediaError(AlbumsError):
    """Raised when media content cannot be decoded or resized."""


class AlbumsDependencyError(AlbumsError):
    """Raised when an optional runtime dependency is missing."""


class AlbumsBlobNotFoundError(AlbumsStoreError):
    """Raised when a content token does not name a stored blob."""
