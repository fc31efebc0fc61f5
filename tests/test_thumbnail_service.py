"""썸네일 생성 (크롭/리사이즈, EXIF 보정, 실패 허용, 복구)"""

import pytest
from PIL import Image

from app.core.upload_config import ThumbnailProfile
from app.services import thumbnail_service

PROFILES = (
    ThumbnailProfile(name="mini", dimension=40, quality=80, crop=True),
    ThumbnailProfile(name="small", dimension=150, quality=80),
    ThumbnailProfile(name="medium", dimension=600, quality=80),
    ThumbnailProfile(name="large", dimension=1080, quality=80),
)


@pytest.fixture
def store_original(tmp_path, image_bytes):
    def _store(name="3f2a.JPG", **kwargs):
        path = tmp_path / "visuals" / "7" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(image_bytes(**kwargs))
        return path
    return _store


def _size(path):
    with Image.open(path) as image:
        return image.size


def test_square_source_produces_every_profile(store_original):
    original = store_original(size=(2000, 2000))

    derived = thumbnail_service.derive_thumbnails(original, PROFILES)

    assert set(derived) == {"mini", "small", "medium", "large"}
    base = original.parent / "thumbnails"
    assert derived["mini"] == base / "mini" / original.name
    assert _size(base / "mini" / original.name) == (40, 40)
    assert _size(base / "small" / original.name) == (150, 150)
    assert _size(base / "medium" / original.name) == (600, 600)
    assert _size(base / "large" / original.name) == (1080, 1080)


def test_resize_keeps_aspect_ratio_and_crop_is_square(store_original):
    original = store_original(size=(1600, 800))

    derived = thumbnail_service.derive_thumbnails(original, PROFILES)

    assert _size(derived["mini"]) == (40, 40)
    assert _size(derived["small"]) == (150, 75)
    assert _size(derived["medium"]) == (600, 300)


def test_derivatives_are_jpeg_regardless_of_source(store_original):
    original = store_original(name="logo.png", fmt="PNG", mode="RGBA", color=(0, 0, 255, 0))

    derived = thumbnail_service.derive_thumbnails(original, PROFILES[:2])

    assert derived["small"].name == "logo.png"
    with Image.open(derived["small"]) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"


def test_exif_orientation_is_applied(store_original):
    # 200x100으로 저장됐지만 90도 회전 표시 → 세워진 100x200
    original = store_original(size=(200, 100), exif_orientation=6)

    derived = thumbnail_service.derive_thumbnails(original, PROFILES[1:2])

    assert _size(derived["small"]) == (150, 300)


def test_unreadable_original_is_logged_not_raised(tmp_path, log_messages):
    original = tmp_path / "broken.jpg"
    original.write_bytes(b"\xff\xd8\xff\xe0 definitely not a jpeg")

    assert thumbnail_service.derive_thumbnails(original, PROFILES) == {}
    assert original.exists()
    assert any("썸네일 생성 실패" in message for message in log_messages)


def test_single_profile_failure_does_not_stop_others(store_original, monkeypatch, log_messages):
    original = store_original(size=(800, 800))
    real_save = thumbnail_service._save_jpeg

    def flaky_save(image, path, quality):
        if "small" in path.parts:
            raise OSError("disk full")
        real_save(image, path, quality)

    monkeypatch.setattr(thumbnail_service, "_save_jpeg", flaky_save)

    derived = thumbnail_service.derive_thumbnails(original, PROFILES)

    assert set(derived) == {"mini", "medium", "large"}
    assert not thumbnail_service.thumbnail_path(original, "small").exists()
    assert any("small" in message for message in log_messages)


def test_regeneration_is_idempotent(store_original):
    original = store_original(size=(1200, 900))

    first = thumbnail_service.derive_thumbnails(original, PROFILES)
    first_sizes = {name: _size(path) for name, path in first.items()}
    second = thumbnail_service.derive_thumbnails(original, PROFILES)

    assert first == second
    assert {name: _size(path) for name, path in second.items()} == first_sizes
    files = sorted(p.relative_to(original.parent) for p in original.parent.rglob("*") if p.is_file())
    assert len(files) == 1 + len(PROFILES)


class TestReconcile:
    def test_regenerates_only_missing_profiles(self, store_original):
        original = store_original(size=(900, 600))
        thumbnail_service.derive_thumbnails(original, PROFILES)
        thumbnail_service.thumbnail_path(original, "medium").unlink()

        assert [p.name for p in thumbnail_service.missing_profiles(original, PROFILES)] == ["medium"]

        regenerated = thumbnail_service.reconcile_thumbnails(original, PROFILES)

        assert set(regenerated) == {"medium"}
        assert thumbnail_service.missing_profiles(original, PROFILES) == []

    def test_nothing_missing(self, store_original):
        original = store_original(size=(300, 300))
        thumbnail_service.derive_thumbnails(original, PROFILES)

        assert thumbnail_service.reconcile_thumbnails(original, PROFILES) == {}

    def test_missing_original(self, tmp_path):
        assert thumbnail_service.reconcile_thumbnails(tmp_path / "gone.jpg", PROFILES) == {}


def test_public_thumbnail_paths_cover_every_profile():
    paths = thumbnail_service.public_thumbnail_paths("visuals/7/abc.JPG", PROFILES)

    assert paths == {
        "mini": "/fs/visuals/7/thumbnails/mini/abc.JPG",
        "small": "/fs/visuals/7/thumbnails/small/abc.JPG",
        "medium": "/fs/visuals/7/thumbnails/medium/abc.JPG",
        "large": "/fs/visuals/7/thumbnails/large/abc.JPG",
    }
