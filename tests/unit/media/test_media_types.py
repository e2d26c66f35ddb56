"""Unit tests for media type resolution."""

from __future__ import annotations

import pytest

from media.media_types import is_supported_media_type, resolve_media_type


def test_resolve_media_type_prefers_supplied_type() -> None:
    """Caller supplied types should win over the file extension."""
    assert resolve_media_type("clip.jpg", "Video/MP4") == "video/mp4"


def test_resolve_media_type_infers_from_name() -> None:
    """Missing types should be inferred from the extension."""
    assert resolve_media_type("beach.png", None) == "image/png"


def test_resolve_media_type_defaults_to_octet_stream() -> None:
    """Unknown extensions should fall back to a generic type."""
    assert resolve_media_type("notes", "") == "application/octet-stream"


@pytest.mark.parametrize(
    ("media_type", "expected"),
    [
        ("image/jpeg", True),
        ("video/quicktime", True),
        ("application/pdf", False),
        ("text/plain", False),
        ("image", False),
    ],
)
def test_is_supported_media_type(media_type: str, expected: bool) -> None:
    """Only image and video kinds should be accepted."""
    assert is_supported_media_type(media_type) is expected
