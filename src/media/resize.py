"""Rendition generation with Pillow.

The catalog treats resizing as a pure, possibly failing function.
Failures surface as ``AlbumsMediaError`` so callers can fall back to
the original content.
"""

from __future__ import annotations

from io import BytesIO
from typing import Protocol

from PIL import Image, ImageOps, UnidentifiedImageError

from core.errors import AlbumsMediaError

_FALLBACK_FORMAT = "PNG"
_JPEG_FORMATS = ("JPEG", "MPO")


class Resizer(Protocol):
    """Scale media content to fit a bounding box."""

    def resize(self, content: bytes, max_width: int, max_height: int) -> bytes:
        """Return content scaled to fit inside the box."""
        ...


class PillowResizer:
    """Resize images with Pillow, preserving aspect ratio."""

    def resize(self, content: bytes, max_width: int, max_height: int) -> bytes:
        """Fit an image inside ``max_width`` x ``max_height``.

        Images are never upscaled. The source format is kept when Pillow
        can encode it, otherwise the rendition is written as PNG.

        Args:
            content: Encoded image bytes.
            max_width: Bounding box width in pixels.
            max_height: Bounding box height in pixels.

        Returns:
            Encoded rendition bytes.

        Raises:
            AlbumsMediaError: If content cannot be decoded or re-encoded.
        """
        if max_width <= 0 or max_height <= 0:
            raise AlbumsMediaError(
                f"Invalid rendition box {max_width}x{max_height}: dimensions must be positive."
            )
        try:
            with Image.open(BytesIO(content)) as source:
                source_format = source.format or _FALLBACK_FORMAT
                image = ImageOps.exif_transpose(source)
                target_size = fit_within(image.width, image.height, max_width, max_height)
                if target_size != image.size:
                    image = image.resize(target_size, Image.Resampling.LANCZOS)
                return _encode(image, source_format)
        except (
            Image.DecompressionBombError,
            UnidentifiedImageError,
            OSError,
            ValueError,
        ) as error:
            raise AlbumsMediaError(f"Cannot resize media content: {error}") from error


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Return dimensions scaled to fit a box without upscaling.

    Args:
        width: Source width.
        height: Source height.
        max_width: Box width.
        max_height: Box height.

    Returns:
        Target ``(width, height)``, each at least one pixel.
    """
    ratio = min(1.0, max_width / width, max_height / height)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def _encode(image: Image.Image, source_format: str) -> bytes:
    """Encode an image in its source format when possible."""
    target_format = "JPEG" if source_format in _JPEG_FORMATS else source_format
    if target_format not in Image.SAVE:
        target_format = _FALLBACK_FORMAT
    if target_format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buffer = BytesIO()
    image.save(buffer, format=target_format)
    return buffer.getvalue()
