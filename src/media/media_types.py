"""Media type resolution for incoming files."""

from __future__ import annotations

import mimetypes

from core.constants import DEFAULT_MEDIA_TYPE, SUPPORTED_MEDIA_KINDS


def resolve_media_type(name: str, media_type: str | None) -> str:
    """Resolve the MIME type of an incoming file.

    Args:
        name: File name, used for inference when no type is given.
        media_type: Caller supplied MIME type.

    Returns:
        Lower-cased MIME type, ``application/octet-stream`` when unknown.
    """
    if media_type and media_type.strip():
        return media_type.strip().lower()
    guessed, _ = mimetypes.guess_type(name)
    return guessed.lower() if guessed else DEFAULT_MEDIA_TYPE


def is_supported_media_type(media_type: str) -> bool:
    """Return True for image and video MIME types."""
    kind = media_type.split("/", 1)[0]
    return kind in SUPPORTED_MEDIA_KINDS and "/" in media_type
