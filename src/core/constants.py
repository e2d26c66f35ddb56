"""Core constants used across albumvault modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".albums")
DEFAULT_BACKEND = "local"
SUPPORTED_BACKENDS = ("local", "memory", "s3")
BLOBS_DIR_NAME = "blobs"
ROOT_REGISTER_FILE_NAME = "root.txt"
TRASH_ALBUM_NAME = "Trash"
ALBUM_ID_PREFIX = "a"
ALBUM_ID_SUFFIX_LENGTH = 6
DEFAULT_MEDIA_TYPE = "application/octet-stream"
SUPPORTED_MEDIA_KINDS = ("image", "video")
DEFAULT_PREVIEW_SIZE = (150, 150)
DEFAULT_SCREEN_SIZE = (1920, 1080)
