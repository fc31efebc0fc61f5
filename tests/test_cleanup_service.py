"""항목/사진 파일 정리"""

from app.core.upload_config import thumbnail_profiles
from app.services import cleanup_service, storage_service, thumbnail_service


def _write_photo(directory, name, profiles):
    directory.mkdir(parents=True, exist_ok=True)
    original = directory / name
    original.write_bytes(b"original")
    for profile in profiles:
        thumb = thumbnail_service.thumbnail_path(original, profile.name)
        thumb.parent.mkdir(parents=True, exist_ok=True)
        thumb.write_bytes(b"thumb")
    return original


class TestRemoveItemFiles:
    def test_removes_originals_thumbnails_and_directory(self):
        profiles = thumbnail_profiles()
        directory = storage_service.item_dir(3)
        _write_photo(directory, "a.jpg", profiles)
        _write_photo(directory, "b.jpg", profiles)

        assert cleanup_service.remove_item_files(3, ["a.jpg", "b.jpg"]) is True
        assert not directory.exists()

    def test_missing_files_are_not_errors(self):
        directory = storage_service.item_dir(4)
        _write_photo(directory, "a.jpg", [])

        assert cleanup_service.remove_item_files(4, ["a.jpg", "already-gone.jpg"]) is True
        assert cleanup_service.remove_item_files(99, ["x.jpg"]) is True

    def test_keeps_directory_with_unexpected_content(self, log_messages):
        directory = storage_service.item_dir(5)
        _write_photo(directory, "a.jpg", thumbnail_profiles())
        (directory / "notes.txt").write_text("keep me")

        assert cleanup_service.remove_item_files(5, ["a.jpg"]) is False
        assert sorted(p.name for p in directory.iterdir()) == ["notes.txt"]
        assert any("디렉토리를 유지" in message for message in log_messages)


class TestDiscardPhotoFiles:
    def test_removes_only_listed_photos(self):
        profiles = thumbnail_profiles()
        directory = storage_service.item_dir(6)
        _write_photo(directory, "keep.jpg", profiles)
        _write_photo(directory, "drop.jpg", profiles)

        cleanup_service.discard_photo_files(directory, ["drop.jpg"], profiles)

        assert (directory / "keep.jpg").exists()
        assert not (directory / "drop.jpg").exists()
        for profile in profiles:
            assert thumbnail_service.thumbnail_path(directory / "keep.jpg", profile.name).exists()
            assert not thumbnail_service.thumbnail_path(directory / "drop.jpg", profile.name).exists()

    def test_prunes_empty_directories(self):
        profiles = thumbnail_profiles()
        directory = storage_service.item_dir(8)
        _write_photo(directory, "only.jpg", profiles)

        cleanup_service.discard_photo_files(directory, ["only.jpg"], profiles)

        assert not directory.exists()


def test_remove_directory(media_root):
    directory = storage_service.item_dir(9)
    _write_photo(directory, "a.jpg", thumbnail_profiles())
    (directory / ".a.jpg.1234.tmp").write_bytes(b"partial")

    cleanup_service.remove_directory(directory)
    cleanup_service.remove_directory(directory)

    assert not directory.exists()
    assert (media_root / "visuals").exists()
