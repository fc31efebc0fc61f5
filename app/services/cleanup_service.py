# app/services/cleanup_service.py
import shutil
from pathlib import Path
from typing import Iterable

from app.core.logger import logger
from app.core.upload_config import ThumbnailProfile
from app.services.storage_service import item_dir
from app.services.thumbnail_service import THUMBNAILS_DIRNAME, thumbnail_path


def _remove_file(path: Path) -> None:
    """파일 삭제 (이미 없으면 무시)"""
    path.unlink(missing_ok=True)


def remove_dir_if_empty(directory: Path) -> bool:
    """비어 있을 때만 디렉토리 삭제, 삭제됐거나 원래 없으면 True"""
    directory = Path(directory)
    if not directory.exists():
        return True
    if any(directory.iterdir()):
        return False
    directory.rmdir()
    return True


def remove_item_files(item_id: int, filenames: Iterable[str]) -> bool:
    """
    갤러리 항목의 파일 정리
    - 사진 원본 삭제 (없으면 무시)
    - thumbnails/ 전체 삭제 (원본으로 다시 만들 수 있음)
    - 항목 디렉토리는 비었을 때만 삭제
    반환값: 디렉토리까지 지워졌는지
    """
    directory = item_dir(item_id)

    for filename in filenames:
        _remove_file(directory / filename)

    thumbnails_dir = directory / THUMBNAILS_DIRNAME
    if thumbnails_dir.exists():
        shutil.rmtree(thumbnails_dir)

    removed = remove_dir_if_empty(directory)
    if not removed:
        logger.warning(f"예상하지 못한 파일이 남아 디렉토리를 유지합니다: {directory}")
    return removed


def discard_photo_files(
    directory: Path,
    filenames: Iterable[str],
    profiles: Iterable[ThumbnailProfile]
) -> None:
    """
    지정한 사진 원본과 프로필별 썸네일 삭제
    빈 프로필 디렉토리, thumbnails/, 항목 디렉토리도 비면 같이 정리
    """
    directory = Path(directory)
    profiles = list(profiles)

    for filename in filenames:
        original = directory / filename
        _remove_file(original)
        for profile in profiles:
            _remove_file(thumbnail_path(original, profile.name))

    thumbnails_dir = directory / THUMBNAILS_DIRNAME
    for profile in profiles:
        remove_dir_if_empty(thumbnails_dir / profile.name)
    remove_dir_if_empty(thumbnails_dir)
    remove_dir_if_empty(directory)


def remove_directory(directory: Path) -> None:
    """디렉토리 통째로 삭제 (중단된 요청이 만든 디렉토리 전용)"""
    directory = Path(directory)
    if directory.exists():
        shutil.rmtree(directory)
