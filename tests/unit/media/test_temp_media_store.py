from __future__ import annotations

import io
from pathlib import Path

import pytest
from starlette.datastructures import Headers, UploadFile

from videoprompt.generate.generate_errors import PayloadTooLargeError
from videoprompt.generate.generate_models import InputRole
from videoprompt.media.temp_media_store import TempMediaStore


def make_upload(data: bytes, filename: str, content_type: str | None = "video/mp4") -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else Headers({})
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=headers)


@pytest.fixture
def store(tmp_path: Path) -> TempMediaStore:
    return TempMediaStore(root=tmp_path / "temp", max_upload_bytes=1024, chunk_size=16)


@pytest.mark.asyncio
async def test_persist_upload_writes_sanitized_unique_file(store: TempMediaStore) -> None:
    media = await store.persist_upload(make_upload(b"x" * 100, "my cat video.mp4"), InputRole.STYLE)

    assert media.path.exists()
    assert media.path.read_bytes() == b"x" * 100
    assert media.path.parent == store.root
    assert media.path.name.endswith("-my_cat_video.mp4")
    assert " " not in media.path.name
    assert media.size_bytes == 100
    assert media.mime_type == "video/mp4"
    assert media.filename == "my cat video.mp4"
    assert media.role is InputRole.STYLE


@pytest.mark.asyncio
async def test_same_name_uploads_do_not_collide(store: TempMediaStore) -> None:
    first = await store.persist_upload(make_upload(b"a", "clip.mp4"), InputRole.STYLE)
    second = await store.persist_upload(make_upload(b"b", "clip.mp4"), InputRole.TARGET)

    assert first.path != second.path
    assert first.path.read_bytes() == b"a"
    assert second.path.read_bytes() == b"b"


@pytest.mark.asyncio
async def test_generic_content_type_falls_back_to_default(store: TempMediaStore) -> None:
    octet = await store.persist_upload(
        make_upload(b"a", "clip.mov", "application/octet-stream"), InputRole.STYLE
    )
    missing = await store.persist_upload(make_upload(b"a", "clip.mov", None), InputRole.TARGET)
    quicktime = await store.persist_upload(
        make_upload(b"a", "clip.mov", "video/quicktime"), InputRole.TARGET
    )

    assert octet.mime_type == "video/mp4"
    assert missing.mime_type == "video/mp4"
    assert quicktime.mime_type == "video/quicktime"


@pytest.mark.asyncio
async def test_payload_too_large_removes_partial_file(store: TempMediaStore) -> None:
    with pytest.raises(PayloadTooLargeError):
        await store.persist_upload(make_upload(b"x" * 2048, "big.mp4"), InputRole.TARGET)

    assert list(store.root.iterdir()) == []


def test_remove_is_idempotent(store: TempMediaStore, tmp_path: Path) -> None:
    path = tmp_path / "gone.mp4"
    path.write_bytes(b"data")

    store.remove(path)
    store.remove(path)

    assert not path.exists()


@pytest.mark.asyncio
async def test_lease_removes_files_on_success(store: TempMediaStore) -> None:
    async with store.lease() as lease:
        style = await lease.persist(make_upload(b"s", "cat.mp4"), InputRole.STYLE)
        target = await lease.persist(make_upload(b"t", "dog.mp4"), InputRole.TARGET)
        assert style.path.exists() and target.path.exists()

    assert not style.path.exists()
    assert not target.path.exists()
    assert lease.media == []


@pytest.mark.asyncio
async def test_lease_removes_files_on_failure(store: TempMediaStore) -> None:
    with pytest.raises(RuntimeError):
        async with store.lease() as lease:
            style = await lease.persist(make_upload(b"s", "cat.mp4"), InputRole.STYLE)
            raise RuntimeError("upload failed")

    assert not style.path.exists()


@pytest.mark.asyncio
async def test_lease_cleans_earlier_file_when_second_is_too_large(store: TempMediaStore) -> None:
    with pytest.raises(PayloadTooLargeError):
        async with store.lease() as lease:
            await lease.persist(make_upload(b"s", "cat.mp4"), InputRole.STYLE)
            await lease.persist(make_upload(b"t" * 4096, "dog.mp4"), InputRole.TARGET)

    assert list(store.root.iterdir()) == []
