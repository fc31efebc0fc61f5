"""원본 파일 저장과 경로 처리"""

import io

import pytest

from app.core import errors
from app.services import storage_service


class BrokenStream(io.RawIOBase):
    """중간에 읽기가 실패하는 스트림"""

    def __init__(self):
        self.calls = 0

    def readable(self):
        return True

    def readinto(self, buffer):
        self.calls += 1
        if self.calls > 1:
            raise OSError("connection reset")
        buffer[:4] = b"abcd"
        return 4


class TestStoreFile:
    def test_generates_unique_name_with_original_extension(self, tmp_path):
        destination = tmp_path / "visuals" / "7"

        first = storage_service.store_file(io.BytesIO(b"one"), destination, "photo.JPG")
        second = storage_service.store_file(io.BytesIO(b"two"), destination, "photo.JPG")

        assert first != second
        assert first.suffix == ".JPG"
        assert first.stem != "photo"
        assert first.read_bytes() == b"one"
        assert second.read_bytes() == b"two"

    def test_creates_missing_directories(self, tmp_path):
        destination = tmp_path / "a" / "b" / "c"

        path = storage_service.store_file(io.BytesIO(b"data"), destination, "x.png")

        assert path.parent == destination
        assert path.is_file()

    def test_fixed_filename(self, tmp_path):
        path = storage_service.store_file(io.BytesIO(b"pdf"), tmp_path, "upload.pdf", filename="portfolio.pdf")

        assert path == tmp_path / "portfolio.pdf"

    def test_leaves_no_temporary_files(self, tmp_path):
        storage_service.store_file(io.BytesIO(b"data"), tmp_path, "x.jpg")

        assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []

    def test_directory_failure_is_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(errors.StorageError):
            storage_service.store_file(io.BytesIO(b"data"), blocker / "sub", "x.jpg")

    def test_copy_failure_removes_partial_file(self, tmp_path):
        destination = tmp_path / "dest"

        with pytest.raises(errors.StorageError):
            storage_service.store_file(io.BufferedReader(BrokenStream()), destination, "x.jpg")

        assert list(destination.iterdir()) == []

    def test_dotfile_style_name_keeps_extension(self, tmp_path):
        path = storage_service.store_file(io.BytesIO(b"data"), tmp_path, ".jpg")

        assert path.suffix == ".jpg"
        assert path.name != ".jpg"


class TestPaths:
    def test_item_dir_uses_identifier(self, media_root):
        assert storage_service.item_dir(7) == media_root / "visuals" / "7"

    def test_public_path(self):
        assert storage_service.public_path("visuals/7/a.jpg") == "/fs/visuals/7/a.jpg"

    def test_relative_to_media(self, media_root):
        assert storage_service.relative_to_media(media_root / "visuals" / "1" / "a.jpg") == "visuals/1/a.jpg"


class TestResolveMediaPath:
    def test_existing_file(self, media_root):
        target = media_root / "visuals" / "1" / "a.jpg"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"x")

        assert storage_service.resolve_media_path("visuals/1/a.jpg") == "visuals/1/a.jpg"
        assert storage_service.resolve_media_path("/visuals/1/a.jpg") == "visuals/1/a.jpg"

    @pytest.mark.parametrize("path", [None, "", "../secret.txt", "visuals/../../etc/passwd"])
    def test_rejects_missing_or_traversal(self, path):
        with pytest.raises(errors.ValidationError):
            storage_service.resolve_media_path(path)

    def test_missing_file(self):
        with pytest.raises(errors.NotFoundError):
            storage_service.resolve_media_path("visuals/1/nope.jpg")
