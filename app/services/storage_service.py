# app/services/storage_service.py
import os
import shutil
import uuid
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from app.config import settings
from app.core import errors
from app.core.file_security import safe_extension
from app.core.logger import logger

VISUALS_DIRNAME = "visuals"
COVERS_DIRNAME = "covers"
PORTFOLIOS_DIRNAME = "portfolios"


def media_root() -> Path:
    return Path(settings.media_root)


def visuals_root() -> Path:
    return media_root() / VISUALS_DIRNAME


def item_dir(item_id: int) -> Path:
    """갤러리 항목 디렉토리 (제목이 아니라 ID 기준이라 제목을 바꿔도 그대로)"""
    return visuals_root() / str(item_id)


def relative_to_media(path: Path) -> str:
    """media_root 기준 상대 경로 (URL용 / 구분자)"""
    return Path(path).relative_to(media_root()).as_posix()


def public_path(relative: str) -> str:
    """정적 파일 마운트 경로를 붙인 공개 경로"""
    mount = settings.public_mount.rstrip("/")
    return f"{mount}/{relative.lstrip('/')}"


def resolve_media_path(user_path: str | None) -> str:
    """
    사용자가 넘긴 경로를 media_root 기준 상대 경로로 정리
    - 비었거나 '..'이 있거나 루트 밖을 가리키면 ValidationError
    - 파일이 없으면 NotFoundError
    """
    if not user_path:
        raise errors.ValidationError("path 파라미터가 필요합니다")

    relative = PurePosixPath(user_path.replace("\\", "/").lstrip("/"))
    if ".." in relative.parts or not relative.parts:
        raise errors.ValidationError("잘못된 경로입니다 ('..' 포함)")

    root = media_root().resolve()
    full_path = (root / relative).resolve()
    if not full_path.is_relative_to(root):
        raise errors.ValidationError("잘못된 경로입니다 (저장소 밖)")

    if not full_path.is_file():
        raise errors.NotFoundError("원본 파일을 찾을 수 없습니다")

    return relative.as_posix()


def generate_filename(original_filename: str | None) -> str:
    """고유 파일명 생성 (UUID + 원본 확장자)"""
    return f"{uuid.uuid4()}{safe_extension(original_filename)}"


def store_file(
    stream: BinaryIO,
    destination_dir: Path,
    original_filename: str | None = None,
    filename: str | None = None
) -> Path:
    """
    검증된 파일을 destination_dir에 저장하고 최종 경로 반환
    - filename이 없으면 UUID 파일명 생성
    - 같은 디렉토리의 임시 파일에 쓴 뒤 rename (중간에 죽어도 잘린 파일이 최종 이름으로 보이지 않음)
    """
    destination_dir = Path(destination_dir)
    filename = filename or generate_filename(original_filename)
    final_path = destination_dir / filename
    tmp_path = destination_dir / f".{filename}.{uuid.uuid4().hex[:8]}.tmp"

    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"저장 디렉토리 생성 실패: {destination_dir} - {e}")
        raise errors.StorageError("저장 디렉토리를 만들지 못했습니다") from e

    try:
        with open(tmp_path, "wb") as buffer:
            shutil.copyfileobj(stream, buffer)
            buffer.flush()
            os.fsync(buffer.fileno())
        os.replace(tmp_path, final_path)
    except OSError as e:
        logger.error(f"파일 저장 실패: {final_path} - {e}")
        tmp_path.unlink(missing_ok=True)
        raise errors.StorageError("파일을 저장하지 못했습니다") from e

    logger.debug(f"파일 저장: {final_path}")
    return final_path
