"""Unit tests for file operations inside an album."""

from __future__ import annotations

import pytest
from PIL import Image

from albums import album_files
from albums.catalog import AlbumCatalog
from albums.handles import Album
from core.types import MediaItem
from media.resize import PillowResizer
from store.content_store import MemoryContentStore
from store.root_register import MemoryRootRegister
from tests.album_support import (
    FakeResizer,
    FlakyContentStore,
    memory_catalog,
    persisted_albums,
    persisted_files,
    png_bytes,
)


async def _album(catalog: AlbumCatalog, name: str = "Trips") -> Album:
    result = await catalog.create_album(name)
    assert result.ok and result.value is not None
    return result.value


@pytest.mark.asyncio
async def test_add_files_cascades_after_every_item() -> None:
    """Each accepted file should trigger one root register write."""
    catalog, _, register = memory_catalog()
    album = await _album(catalog)
    writes = register.write_count

    result = await album.add_files(
        [(png_bytes(), "b.png", "image/png"), (png_bytes(), "a.png", "image/png")]
    )

    assert result.ok and len(result.value or ()) == 2
    assert register.write_count == writes + 2


@pytest.mark.asyncio
async def test_add_files_skips_unsupported_items_with_warning() -> None:
    """An unsupported item should be skipped while the image is added."""
    catalog, store, register = memory_catalog()
    album = await _album(catalog)

    result = await album.add_files(
        [
            MediaItem(content=png_bytes(), name="beach.png", media_type="image/png"),
            MediaItem(content=b"%PDF-1.7", name="notes.pdf", media_type="application/pdf"),
        ]
    )

    files = await persisted_files(store, register, album.album_id)
    assert result.ok and len(result.warnings) == 1
    assert "notes.pdf" in result.warnings[0]
    assert [record.name for record in files] == ["beach.png"]


@pytest.mark.asyncio
async def test_add_files_infers_media_type_from_name() -> None:
    """Items without a media type should be typed from their extension."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)

    await album.add_files([(png_bytes(), "clip.mp4")])

    files = await album.get_files()
    assert files[0].media_type == "video/mp4"


@pytest.mark.asyncio
async def test_add_files_stores_renditions_with_configured_boxes() -> None:
    """Preview and screen renditions should be stored separately."""
    resizer = FakeResizer()
    catalog, store, _ = memory_catalog(resizer=resizer)
    album = await _album(catalog)
    content = png_bytes()

    await album.add_files([(content, "a.png", "image/png")])

    record = (await album.get_files())[0]
    assert resizer.calls == [(150, 150), (1920, 1080)]
    assert await store.get(record.full_token) == content
    assert await store.get(record.preview_token or "") == b"150x150:" + content
    assert await store.get(record.screen_token or "") == b"1920x1080:" + content


@pytest.mark.asyncio
async def test_add_files_falls_back_to_original_when_resize_fails() -> None:
    """Renditions should reuse the original token when resizing fails."""
    catalog, _, _ = memory_catalog(resizer=FakeResizer(fail=True))
    album = await _album(catalog)

    result = await album.add_files([(b"\x00video", "clip.mov", "video/quicktime")])

    record = (await album.get_files())[0]
    assert result.ok
    assert record.preview_token == record.full_token == record.screen_token


@pytest.mark.asyncio
async def test_add_files_keeps_going_after_store_failure() -> None:
    """A failed item should be reported while earlier items stay committed."""
    store = FlakyContentStore()
    catalog, _, register = memory_catalog(store=store)
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])
    store.fail_puts = True

    result = await album.add_files(
        [(png_bytes(), "b.png", "image/png"), (png_bytes(), "c.png", "image/png")]
    )

    files = await persisted_files(store, register, album.album_id)
    assert not result.ok and len(result.errors) == 2
    assert [record.name for record in files] == ["a.png"]


@pytest.mark.asyncio
async def test_add_files_rejects_malformed_batch_before_storing() -> None:
    """A malformed item should fail the call with nothing stored."""
    store = FlakyContentStore()
    catalog, _, _ = memory_catalog(store=store)
    album = await _album(catalog)
    puts = store.put_count

    result = await album.add_files([(png_bytes(), "a.png", "image/png"), ("text", "")])

    assert not result.ok
    assert store.put_count == puts
    assert await album.get_files() == ()


@pytest.mark.asyncio
async def test_add_files_refuses_trash() -> None:
    """Files cannot be added straight into Trash."""
    catalog, _, _ = memory_catalog()
    trash = await catalog.trash()

    result = await trash.add_files([(png_bytes(), "a.png", "image/png")])

    assert not result.ok


@pytest.mark.asyncio
async def test_files_are_sorted_and_thumbnail_tracks_first_file() -> None:
    """The album thumbnail should follow the alphabetically first file."""
    catalog, store, register = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "b.png", "image/png")])
    await album.add_files([(png_bytes(), "A.png", "image/png")])

    files = await persisted_files(store, register, album.album_id)
    record = next(
        item for item in await persisted_albums(store, register) if item.album_id == album.album_id
    )
    assert [item.name for item in files] == ["A.png", "b.png"]
    assert record.thumb_token == files[0].preview_token


@pytest.mark.asyncio
async def test_pinned_thumbnail_survives_new_files() -> None:
    """An explicitly pinned thumbnail should not follow later sorting."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "m.png", "image/png")])
    pinned = await album.find_file_by_name("m.png")
    assert pinned is not None

    await pinned.set_as_album_thumbnail()
    await album.add_files([(png_bytes(), "a.png", "image/png")])

    assert album.record.thumb_token == pinned.record.preview_token


@pytest.mark.asyncio
async def test_pinned_thumbnail_goes_stale_after_remove_forever() -> None:
    """Purging the pinned file leaves the album thumbnail pointing at it."""
    catalog, store, register = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])
    file = await album.find_file_by_name("a.png")
    assert file is not None
    await file.set_as_album_thumbnail()

    result = await file.remove_forever()

    record = next(
        item for item in await persisted_albums(store, register) if item.album_id == album.album_id
    )
    assert result.ok and await album.get_files() == ()
    assert record.thumb_token == file.record.preview_token


@pytest.mark.asyncio
async def test_clear_thumbnail_returns_to_derived_thumbnail() -> None:
    """Unpinning should derive the thumbnail from the first file again."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    await album.add_files(
        [(png_bytes(), "a.png", "image/png"), (png_bytes(), "z.png", "image/png")]
    )
    last = await album.find_file_by_name("z.png")
    assert last is not None
    await last.set_as_album_thumbnail()

    result = await album.clear_thumbnail()

    assert result.ok
    assert album.record.thumb_token == (await album.get_files())[0].preview_token


@pytest.mark.asyncio
async def test_delete_thumbnail_for_file_clears_preview() -> None:
    """Dropping a file's preview should also clear the derived album thumbnail."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])
    file = await album.find_file_by_name("a.png")
    assert file is not None

    result = await album.delete_thumbnail_for_file(file.full_token)

    assert result.ok
    assert (await album.get_files())[0].preview_token is None
    assert album.record.thumb_token is None


@pytest.mark.asyncio
async def test_set_thumbnail_for_foreign_file_fails() -> None:
    """Pinning a file that lives in another album should fail."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    other = await _album(catalog, "Other")
    await other.add_files([(png_bytes(), "a.png", "image/png")])
    foreign = await other.find_file_by_name("a.png")
    assert foreign is not None

    result = await album_files.set_as_album_thumbnail(catalog, album.album_id, foreign.full_token)

    assert not result.ok and "not found" in result.errors[0]


@pytest.mark.asyncio
async def test_clear_album_empties_document() -> None:
    """Clearing should leave an empty document reachable from the root."""
    catalog, store, register = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])

    result = await album.clear()

    assert result.ok
    assert await persisted_files(store, register, album.album_id) == []
    assert album.record.thumb_token is None


@pytest.mark.asyncio
async def test_add_to_album_copies_record_with_shared_tokens() -> None:
    """Copies should reuse content tokens and leave the source untouched."""
    catalog, store, register = memory_catalog()
    source = await _album(catalog, "Source")
    target = await _album(catalog, "Target")
    await source.add_files([(png_bytes(), "a.png", "image/png")])
    file = await source.find_file_by_name("a.png")
    assert file is not None

    result = await file.add_to_album(target.album_id)

    copied = await persisted_files(store, register, target.album_id)
    assert result.ok and result.value is not None
    assert result.value.album == target
    assert copied == [file.record]
    assert [record.name for record in await source.get_files()] == ["a.png"]


@pytest.mark.asyncio
async def test_add_to_album_refuses_trash_target() -> None:
    """Copying into Trash should fail."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])
    file = await album.find_file_by_name("a.png")
    assert file is not None

    result = await file.add_to_album((await catalog.trash()).album_id)

    assert not result.ok


@pytest.mark.asyncio
async def test_file_handle_reads_stored_content() -> None:
    """File handles should read back the original and its renditions."""
    catalog, _, _ = memory_catalog()
    album = await _album(catalog)
    content = png_bytes()
    await album.add_files([(content, "a.png", "image/png")])
    file = await album.find_file_by_full_token((await album.get_files())[0].full_token)
    assert file is not None

    assert await file.read_full() == content
    assert await file.read_preview() == b"150x150:" + content
    assert await file.read_screen() == b"1920x1080:" + content


class _CrashingResizer:
    def resize(self, content: bytes, max_width: int, max_height: int) -> bytes:
        raise RuntimeError("decoder crashed")


@pytest.mark.asyncio
async def test_add_files_falls_back_on_unexpected_resizer_error() -> None:
    """Any resizer exception should fall back instead of aborting the batch."""
    catalog = AlbumCatalog(MemoryContentStore(), MemoryRootRegister(), _CrashingResizer())
    album = await _album(catalog)

    result = await album.add_files(
        [(png_bytes(), "a.png", "image/png"), (png_bytes(), "b.png", "image/png")]
    )

    files = await album.get_files()
    assert result.ok and len(result.value or ()) == 2
    assert all(record.preview_token == record.full_token for record in files)


@pytest.mark.asyncio
async def test_add_files_falls_back_on_oversized_image(monkeypatch) -> None:
    """Images over the Pillow pixel limit should be stored without renditions."""
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    catalog = AlbumCatalog(MemoryContentStore(), MemoryRootRegister(), PillowResizer())
    album = await _album(catalog)

    result = await album.add_files([(png_bytes(400, 300), "huge.png", "image/png")])

    record = (await album.get_files())[0]
    assert result.ok
    assert record.preview_token == record.full_token == record.screen_token


@pytest.mark.asyncio
async def test_add_to_album_refuses_same_album() -> None:
    """Copying a file into its own album should fail without a write."""
    catalog, _, register = memory_catalog()
    album = await _album(catalog)
    await album.add_files([(png_bytes(), "a.png", "image/png")])
    file = await album.find_file_by_name("a.png")
    assert file is not None
    writes = register.write_count

    result = await file.add_to_album(album.album_id)

    assert not result.ok
    assert register.write_count == writes
    assert len(await album.get_files()) == 1
