"""Catalog and album document blob codecs.

Both blob kinds are JSON arrays. Field names are the persisted wire
names; every element is validated when a blob is decoded.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from core.constants import DEFAULT_MEDIA_TYPE
from core.errors import AlbumsValidationError
from core.types import AlbumRecord, FileRecord


def encode_catalog(records: list[AlbumRecord]) -> bytes:
    """Serialize catalog records into a blob.

    Args:
        records: Sorted album records.

    Returns:
        UTF-8 JSON bytes.
    """
    payload: list[dict[str, object]] = []
    for record in records:
        item: dict[str, object] = {
            "name": record.name,
            "albumId": record.album_id,
            "albumFileId": record.current_token,
            "thumbFileId": record.thumb_token,
        }
        if record.thumb_pinned:
            item["thumbPinned"] = True
        payload.append(item)
    return _dump(payload)


def decode_catalog(
    content: bytes,
    new_album_id: Callable[[], str],
) -> tuple[list[AlbumRecord], int]:
    """Parse and validate a catalog blob.

    Records written before stable ids existed, or carrying an id already
    seen earlier in the blob, are assigned a fresh id.

    Args:
        content: Catalog blob bytes.
        new_album_id: Factory for missing album ids.

    Returns:
        Pair of records in blob order and the number of ids assigned.

    Raises:
        AlbumsValidationError: If the blob is not a valid catalog.
    """
    records: list[AlbumRecord] = []
    seen_ids: set[str] = set()
    assigned = 0
    for index, item in enumerate(_load_array(content, "catalog")):
        name = _require_str(item, "name", "catalog", index)
        token = _require_str(item, "albumFileId", "catalog", index)
        album_id = _optional_str(item, "albumId", "catalog", index)
        if not album_id or album_id in seen_ids:
            album_id = new_album_id()
            assigned += 1
        seen_ids.add(album_id)
        records.append(
            AlbumRecord(
                name=name,
                album_id=album_id,
                current_token=token,
                thumb_token=_optional_str(item, "thumbFileId", "catalog", index),
                thumb_pinned=item.get("thumbPinned") is True,
            )
        )
    return records, assigned


def encode_album(files: list[FileRecord]) -> bytes:
    """Serialize an album document into a blob."""
    payload = [
        {
            "name": record.name,
            "mime": record.media_type,
            "fullFileId": record.full_token,
            "thumbFileId": record.preview_token,
            "screenFileId": record.screen_token,
            "originalAlbumIds": list(record.provenance),
        }
        for record in files
    ]
    return _dump(payload)


def decode_album(content: bytes) -> list[FileRecord]:
    """Parse and validate an album document blob.

    Args:
        content: Album blob bytes.

    Returns:
        File records in blob order.

    Raises:
        AlbumsValidationError: If the blob is not a valid album document.
    """
    files: list[FileRecord] = []
    for index, item in enumerate(_load_array(content, "album")):
        provenance = item.get("originalAlbumIds") or []
        if not isinstance(provenance, list) or not all(
            isinstance(album_id, str) for album_id in provenance
        ):
            raise AlbumsValidationError(
                f"Invalid album entry {index}: 'originalAlbumIds' must be a list of strings."
            )
        files.append(
            FileRecord(
                name=_require_str(item, "name", "album", index),
                media_type=_optional_str(item, "mime", "album", index) or DEFAULT_MEDIA_TYPE,
                full_token=_require_str(item, "fullFileId", "album", index),
                preview_token=_optional_str(item, "thumbFileId", "album", index),
                screen_token=_optional_str(item, "screenFileId", "album", index),
                provenance=tuple(provenance),
            )
        )
    return files


def _dump(payload: list[dict[str, object]]) -> bytes:
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def _load_array(content: bytes, kind: str) -> list[dict[str, Any]]:
    """Decode a JSON array of objects."""
    try:
        payload = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise AlbumsValidationError(f"Failed to parse {kind} blob: {error}.") from error
    if not isinstance(payload, list):
        raise AlbumsValidationError(f"Invalid {kind} blob: expected JSON array at top level.")
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise AlbumsValidationError(f"Invalid {kind} entry {index}: expected JSON object.")
    return payload


def _require_str(item: dict[str, Any], key: str, kind: str, index: int) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise AlbumsValidationError(f"Invalid {kind} entry {index}: '{key}' must be a string.")
    return value


def _optional_str(item: dict[str, Any], key: str, kind: str, index: int) -> str | None:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise AlbumsValidationError(
            f"Invalid {kind} entry {index}: '{key}' must be a string or null."
        )
    return value
