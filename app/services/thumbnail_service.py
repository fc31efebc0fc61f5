# app/services/thumbnail_service.py
import os
import uuid
from pathlib import Path, PurePosixPath
from typing import Iterable

from PIL import Image, ImageOps

from app.core import errors
from app.core.logger import logger
from app.core.upload_config import ThumbnailProfile
from app.services.storage_service import public_path

THUMBNAILS_DIRNAME = "thumbnails"
BACKGROUND_COLOR = (255, 255, 255)  # 투명 영역을 채울 색 (JPEG는 알파 없음)


def thumbnail_path(original_path: Path, profile_name: str) -> Path:
    """<원본 디렉토리>/thumbnails/<프로필>/<원본 파일명>"""
    original_path = Path(original_path)
    return original_path.parent / THUMBNAILS_DIRNAME / profile_name / original_path.name


def public_thumbnail_paths(relative_original: str, profiles: Iterable[ThumbnailProfile]) -> dict[str, str]:
    """{프로필 이름 → 공개 경로} (모든 프로필 포함)"""
    original = PurePosixPath(relative_original)
    return {
        profile.name: public_path(
            (original.parent / THUMBNAILS_DIRNAME / profile.name / original.name).as_posix()
        )
        for profile in profiles
    }


def _fill(image: Image.Image, size: int) -> Image.Image:
    """가운데 기준으로 잘라서 정확히 size x size"""
    return ImageOps.fit(image, (size, size), method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))


def _resize_to_width(image: Image.Image, width: int) -> Image.Image:
    """가로를 width로 맞추고 세로는 비율대로"""
    height = max(1, int(image.height * width / image.width + 0.5))
    return image.resize((width, height), Image.Resampling.LANCZOS)


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if image.mode == "P" and "transparency" in image.info:
        image = image.convert("RGBA")
    if image.mode in ("RGBA", "LA"):
        background = Image.new("RGB", image.size, BACKGROUND_COLOR)
        background.paste(image, mask=image.getchannel("A"))
        return background
    return image.convert("RGB")


def _save_jpeg(image: Image.Image, path: Path, quality: int) -> None:
    """JPEG 저장 (임시 파일 → rename)"""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.parent / f".{path.name}.{uuid.uuid4().hex[:8]}.tmp"
    try:
        image.save(tmp_path, format="JPEG", quality=quality)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def _log_failure(original_path: Path, detail: str, exc: Exception) -> None:
    error = errors.DerivationError(f"{detail}: {original_path} - {exc}")
    logger.warning(f"썸네일 생성 실패 (원본은 유지): {error.detail}")


def derive_thumbnails(original_path: Path, profiles: Iterable[ThumbnailProfile]) -> dict[str, Path]:
    """
    원본 이미지로 프로필별 썸네일 생성
    - EXIF 방향 보정 후 처리
    - crop 프로필은 정사각형 채우기, 나머지는 가로 기준 리사이즈
    - 원본 포맷과 관계없이 JPEG로 저장
    - 실패는 로그만 남기고 다음 프로필 계속 (썸네일은 언제든 다시 만들 수 있음)
    반환값: 실제로 만들어진 {프로필 이름 → 경로}
    """
    original_path = Path(original_path)
    try:
        with Image.open(original_path) as opened:
            image = ImageOps.exif_transpose(opened)
            image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        _log_failure(original_path, "원본 이미지를 열 수 없습니다", e)
        return {}

    derived = {}
    for profile in profiles:
        target = thumbnail_path(original_path, profile.name)
        try:
            if profile.crop:
                thumb = _fill(image, profile.dimension)
            else:
                thumb = _resize_to_width(image, profile.dimension)
            _save_jpeg(_to_rgb(thumb), target, profile.quality)
        except (OSError, ValueError) as e:
            _log_failure(original_path, f"{profile.name} 썸네일", e)
            continue
        derived[profile.name] = target

    logger.debug(f"썸네일 {len(derived)}개 생성: {original_path.name}")
    return derived


def missing_profiles(original_path: Path, profiles: Iterable[ThumbnailProfile]) -> list[ThumbnailProfile]:
    """썸네일 파일이 없는 프로필 목록"""
    return [
        profile for profile in profiles
        if not thumbnail_path(original_path, profile.name).is_file()
    ]


def reconcile_thumbnails(original_path: Path, profiles: Iterable[ThumbnailProfile]) -> dict[str, Path]:
    """빠진 프로필만 다시 생성 (원본이 없으면 아무것도 하지 않음)"""
    original_path = Path(original_path)
    if not original_path.is_file():
        logger.warning(f"원본이 없어 썸네일을 복구할 수 없습니다: {original_path}")
        return {}

    missing = missing_profiles(original_path, profiles)
    if not missing:
        return {}

    logger.info(f"빠진 썸네일 복구: {original_path.name} ({', '.join(p.name for p in missing)})")
    return derive_thumbnails(original_path, missing)
