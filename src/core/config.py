"""Runtime configuration model for albumvault.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_BACKEND,
    DEFAULT_DATA_ROOT,
    DEFAULT_PREVIEW_SIZE,
    DEFAULT_SCREEN_SIZE,
    SUPPORTED_BACKENDS,
)
from core.errors import AlbumsConfigError
from core.s3_uri import S3Location, parse_s3_uri


@dataclass(frozen=True)
class AlbumsConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the local backend.
        backend: Backend name, one of ``local``, ``memory`` or ``s3``.
        s3_location: Bucket and prefix for the S3 backend.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        preview_size: Bounding box for small file previews.
        screen_size: Bounding box for medium screen renditions.
    """

    data_root: Path
    backend: str = DEFAULT_BACKEND
    s3_location: S3Location | None = None
    s3_region: str | None = None
    s3_profile: str | None = None
    preview_size: tuple[int, int] = DEFAULT_PREVIEW_SIZE
    screen_size: tuple[int, int] = DEFAULT_SCREEN_SIZE

    @classmethod
    def from_env(cls) -> "AlbumsConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            AlbumsConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("ALBUMS_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        backend = os.getenv("ALBUMS_BACKEND", DEFAULT_BACKEND).strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            raise AlbumsConfigError(
                f"Invalid ALBUMS_BACKEND value '{backend}'. "
                f"Use one of: {', '.join(SUPPORTED_BACKENDS)}."
            )
        s3_uri = os.getenv("ALBUMS_S3_URI")
        if backend == "s3" and not s3_uri:
            raise AlbumsConfigError(
                "ALBUMS_BACKEND=s3 requires ALBUMS_S3_URI. "
                "Set ALBUMS_S3_URI to s3://bucket/prefix."
            )
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            backend=backend,
            s3_location=parse_s3_uri(s3_uri) if s3_uri else None,
            s3_region=os.getenv("ALBUMS_S3_REGION"),
            s3_profile=os.getenv("ALBUMS_S3_PROFILE"),
            preview_size=_parse_box_size(
                "ALBUMS_PREVIEW_SIZE", os.getenv("ALBUMS_PREVIEW_SIZE"), DEFAULT_PREVIEW_SIZE
            ),
            screen_size=_parse_box_size(
                "ALBUMS_SCREEN_SIZE", os.getenv("ALBUMS_SCREEN_SIZE"), DEFAULT_SCREEN_SIZE
            ),
        )


def _parse_box_size(
    variable: str,
    raw_value: str | None,
    default: tuple[int, int],
) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` bounding box environment value.

    Args:
        variable: Environment variable name, used in error messages.
        raw_value: Raw string from environment, or None when unset.
        default: Value used when the variable is unset.

    Returns:
        Parsed ``(width, height)`` pair.

    Raises:
        AlbumsConfigError: If value is not two positive integers.
    """
    if raw_value is None or not raw_value.strip():
        return default
    parts = raw_value.lower().split("x")
    try:
        width, height = (int(part) for part in parts)
    except ValueError as error:
        raise AlbumsConfigError(
            f"Invalid {variable} value: expected WIDTHxHEIGHT, got '{raw_value}'. "
            f"Set {variable} to a value like 150x150."
        ) from error
    if width <= 0 or height <= 0:
        raise AlbumsConfigError(
            f"Invalid {variable} value '{raw_value}': both dimensions must be positive."
        )
    return width, height
