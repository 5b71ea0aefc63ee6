"""
Tests for upload validation, scratch storage and the media store.
"""

import io

import pytest
from fastapi import HTTPException
from starlette.datastructures import Headers, UploadFile

from vidshare.uploads import (
    REJECTED_TYPE_MESSAGE,
    MediaStore,
    ScratchStorage,
    is_allowed_media,
)


def _upload(filename: str, content_type: str, content: bytes = b"data") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        size=len(content),
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def storage(tmp_path):
    storage = ScratchStorage(tmp_path / "scratch", max_file_size=16, max_files=2).open()
    yield storage
    storage.close()


class TestIsAllowedMedia:
    @pytest.mark.parametrize(
        "filename, content_type",
        [
            ("clip.mp4", "video/mp4"),
            ("photo.JPG", "image/jpeg"),
            ("anim.gif", "image/gif"),
            ("movie.mov", "video/quicktime"),
            ("movie.avi", "video/x-msvideo"),
            ("movie.mkv", "video/x-matroska"),
        ],
    )
    def test_accepts_media(self, filename, content_type):
        assert is_allowed_media(filename, content_type)

    @pytest.mark.parametrize(
        "filename, content_type",
        [
            ("notes.txt", "text/plain"),
            ("clip.mp4", "text/plain"),
            ("script.exe", "video/mp4"),
            ("noextension", "video/mp4"),
            ("clip.mp4", None),
        ],
    )
    def test_rejects_everything_else(self, filename, content_type):
        assert not is_allowed_media(filename, content_type)


@pytest.mark.asyncio
class TestScratchStorage:
    async def test_accept_writes_named_files(self, storage):
        stored = await storage.accept([("videoFile", _upload("a.mp4", "video/mp4"))])

        upload = stored["videoFile"]
        assert upload.path.exists()
        assert upload.path.read_bytes() == b"data"
        assert upload.size == 4
        assert upload.path.name.startswith("videoFile-")
        assert upload.path.suffix == ".mp4"

    async def test_text_file_rejected_and_nothing_written(self, storage):
        with pytest.raises(HTTPException) as exc_info:
            await storage.accept(
                [
                    ("thumbnail", _upload("t.png", "image/png")),
                    ("videoFile", _upload("notes.txt", "text/plain")),
                ]
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == REJECTED_TYPE_MESSAGE
        assert list(storage.directory.iterdir()) == []

    async def test_too_many_files(self, storage):
        files = [(f"f{i}", _upload(f"{i}.png", "image/png")) for i in range(3)]

        with pytest.raises(HTTPException) as exc_info:
            await storage.accept(files)

        assert exc_info.value.status_code == 400

    async def test_duplicate_field_rejected(self, storage):
        files = [("avatar", _upload("a.png", "image/png")), ("avatar", _upload("b.png", "image/png"))]

        with pytest.raises(HTTPException):
            await storage.accept(files)

    @pytest.mark.parametrize("field_name", ["../outside/evil", "a/b", "..", "", "x" * 65])
    async def test_unsafe_field_name_rejected(self, storage, tmp_path, field_name):
        with pytest.raises(HTTPException) as exc_info:
            await storage.accept([(field_name, _upload("a.mp4", "video/mp4"))])

        assert exc_info.value.status_code == 400
        assert list(storage.directory.iterdir()) == []
        assert not (tmp_path / "outside").exists()

    async def test_absolute_field_name_rejected(self, storage, tmp_path):
        target_dir = tmp_path / "abs"
        target_dir.mkdir()

        with pytest.raises(HTTPException) as exc_info:
            await storage.accept([(str(target_dir / "pwn"), _upload("a.png", "image/png"))])

        assert exc_info.value.status_code == 400
        assert list(target_dir.iterdir()) == []

    async def test_field_outside_allow_list_rejected(self, storage):
        with pytest.raises(HTTPException) as exc_info:
            await storage.accept(
                [("banner", _upload("b.png", "image/png"))],
                frozenset({"videoFile", "thumbnail"}),
            )

        assert exc_info.value.detail == "Unexpected file field 'banner'"
        assert list(storage.directory.iterdir()) == []

    async def test_declared_size_over_limit(self, storage):
        with pytest.raises(HTTPException) as exc_info:
            await storage.accept([("videoFile", _upload("big.mp4", "video/mp4", b"x" * 17))])

        assert exc_info.value.status_code == 413
        assert list(storage.directory.iterdir()) == []

    async def test_stream_over_limit_is_removed(self, storage):
        upload = _upload("sneaky.mp4", "video/mp4", b"x" * 40)
        upload.size = None

        with pytest.raises(HTTPException) as exc_info:
            await storage.accept([("videoFile", upload)])

        assert exc_info.value.status_code == 413
        assert list(storage.directory.iterdir()) == []

    async def test_names_never_collide(self, storage):
        first = await storage.accept([("videoFile", _upload("a.mp4", "video/mp4"))])
        second = await storage.accept([("videoFile", _upload("a.mp4", "video/mp4"))])

        assert first["videoFile"].path != second["videoFile"].path

    async def test_close_removes_unclaimed_files(self, storage):
        stored = await storage.accept([("videoFile", _upload("a.mp4", "video/mp4"))])

        storage.close()

        assert not stored["videoFile"].path.exists()


@pytest.mark.asyncio
class TestMediaStore:
    async def test_save_moves_file_and_returns_reference(self, storage, tmp_path):
        media = MediaStore(tmp_path / "media").open()
        stored = await storage.accept([("thumbnail", _upload("t.png", "image/png"))])

        reference = media.save(stored["thumbnail"])

        assert reference == f"/media/{stored['thumbnail'].path.name}"
        assert media.path_for(reference).read_bytes() == b"data"
        assert not stored["thumbnail"].path.exists()


class TestMediaReferences:
    def test_remove_ignores_foreign_references(self, tmp_path):
        media = MediaStore(tmp_path / "media").open()
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        media.remove("/media/../keep.txt")
        media.remove("https://cdn.example.com/keep.txt")
        media.remove(None)

        assert outside.exists()
        assert media.path_for("/media/../keep.txt") is None
