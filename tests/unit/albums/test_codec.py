"""Unit tests for catalog and album blob codecs."""

from __future__ import annotations

import json
from typing import Callable

import pytest

from albums.codec import decode_album, decode_catalog, encode_album, encode_catalog
from core.errors import AlbumsValidationError
from core.types import AlbumRecord, FileRecord


def _ids() -> Callable[[], str]:
    counter = iter(range(1, 100))
    return lambda: f"new-{next(counter)}"


def test_encode_catalog_uses_wire_field_names() -> None:
    """Catalog blobs should use the persisted field names."""
    record = AlbumRecord(name="Trips", album_id="a1", current_token="t1")

    payload = json.loads(encode_catalog([record]))

    assert payload == [
        {"name": "Trips", "albumId": "a1", "albumFileId": "t1", "thumbFileId": None}
    ]


def test_encode_catalog_marks_pinned_thumbnails() -> None:
    """Pinned thumbnails should be flagged only when set."""
    record = AlbumRecord(
        name="Trips", album_id="a1", current_token="t1", thumb_token="p", thumb_pinned=True
    )

    records, _ = decode_catalog(encode_catalog([record]), _ids())

    assert records == [record]


def test_decode_catalog_assigns_missing_ids() -> None:
    """Catalogs written without album ids should get fresh ids."""
    content = json.dumps([{"name": "Old", "albumFileId": "t1", "thumbFileId": None}]).encode()

    records, assigned = decode_catalog(content, _ids())

    assert (records[0].album_id, assigned) == ("new-1", 1)


def test_decode_catalog_reassigns_duplicate_ids() -> None:
    """A repeated album id should be replaced on the later record."""
    content = json.dumps(
        [
            {"name": "A", "albumId": "same", "albumFileId": "t1"},
            {"name": "B", "albumId": "same", "albumFileId": "t2"},
        ]
    ).encode()

    records, assigned = decode_catalog(content, _ids())

    assert [record.album_id for record in records] == ["same", "new-1"]
    assert assigned == 1


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b'{"name": "x"}',
        b'[{"name": "x"}]',
        b'[{"name": 3, "albumFileId": "t"}]',
        b'[{"name": "x", "albumFileId": "t", "thumbFileId": 5}]',
        b'["x"]',
    ],
)
def test_decode_catalog_rejects_invalid_payloads(payload: bytes) -> None:
    """Malformed catalogs should fail validation as a whole."""
    with pytest.raises(AlbumsValidationError):
        decode_catalog(payload, _ids())


def test_album_codec_keeps_provenance_order() -> None:
    """Provenance stacks should survive encoding in order."""
    record = FileRecord(
        name="beach.jpg",
        media_type="image/jpeg",
        full_token="f",
        preview_token="p",
        screen_token="s",
        provenance=("a1", "a2"),
    )

    decoded = decode_album(encode_album([record]))

    assert decoded == [record]


def test_decode_album_defaults_optional_fields() -> None:
    """Entries with only name and full token should load."""
    decoded = decode_album(b'[{"name": "a.png", "fullFileId": "f"}]')

    assert decoded[0] == FileRecord(
        name="a.png", media_type="application/octet-stream", full_token="f"
    )


def test_decode_album_rejects_bad_provenance() -> None:
    """Provenance must be a list of album ids."""
    with pytest.raises(AlbumsValidationError):
        decode_album(b'[{"name": "a", "fullFileId": "f", "originalAlbumIds": "a1"}]')
