# app/services/gallery_service.py
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from app.core import errors
from app.core.file_security import validate_upload
from app.core.logger import logger
from app.core.pagination import page_offset
from app.core.upload_config import ThumbnailProfile, UploadConfig, thumbnail_profiles, visual_upload_config
from app.models.gallery import GalleryItem, GalleryItemStatus, GalleryPhoto
from app.services import cleanup_service, storage_service, thumbnail_service

# 파일 시스템과 DB는 트랜잭션을 공유하지 않으므로 순서로 일관성을 맞춤
# - 생성: 파일 쓰기 → DB 커밋
# - 삭제: DB 커밋 → 파일 삭제


def _committed(db: Session):
    return db.query(GalleryItem).filter(GalleryItem.status == GalleryItemStatus.COMMITTED)


def get_item(db: Session, item_id: int) -> GalleryItem:
    """저장 완료된 갤러리 항목 조회"""
    item = _committed(db).filter(GalleryItem.id == item_id).first()
    if not item:
        raise errors.NotFoundError("갤러리 항목을 찾을 수 없습니다")
    return item


def list_items(db: Session) -> list[GalleryItem]:
    """갤러리 항목 목록 (최신순)"""
    return _committed(db)\
        .order_by(GalleryItem.created_at.desc(), GalleryItem.id.desc())\
        .all()


def list_photos(db: Session, item_id: int, page: int = 1, per_page: int | None = None) -> tuple[list[GalleryPhoto], int]:
    """항목의 사진 목록 (최신순), 전체 개수와 함께 반환"""
    get_item(db, item_id)

    query = db.query(GalleryPhoto).filter(GalleryPhoto.item_id == item_id)
    total = query.count()

    query = query.order_by(GalleryPhoto.created_at.desc(), GalleryPhoto.id.desc())
    if per_page is not None:
        query = query.offset(page_offset(page, per_page)).limit(per_page)

    return query.all(), total


def _validate_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise errors.ValidationError("제목은 필수입니다")
    return title


def _validate_all(uploads: list, config: UploadConfig) -> None:
    """파일을 쓰기 전에 전부 검증 (하나라도 실패하면 아무것도 남기지 않음)"""
    for upload in uploads:
        validate_upload(upload, config)


def _discard(directory: Path, filenames: list[str], profiles: Iterable[ThumbnailProfile]) -> None:
    """이번 요청에서 쓴 파일 되돌리기 (실패하면 로그만, 참조 없는 파일은 서빙되지 않음)"""
    if not filenames and not directory.exists():
        return
    try:
        cleanup_service.discard_photo_files(directory, filenames, profiles)
    except OSError as e:
        logger.error(f"고아 파일 정리 실패 (수동 정리 필요): {directory} {filenames} - {e}")


def _store_uploads(directory: Path, uploads: list, config: UploadConfig) -> list[str]:
    """원본 저장 → 썸네일 생성, 저장된 파일명 목록 반환"""
    stored = []
    try:
        for upload in uploads:
            path = storage_service.store_file(upload.file, directory, upload.filename)
            stored.append(path.name)
            thumbnail_service.derive_thumbnails(path, config.profiles)
    except errors.StorageError:
        logger.warning(f"파일 저장 중단, 이번 요청 파일 {len(stored)}개 되돌림: {directory}")
        _discard(directory, stored, config.profiles)
        raise
    return stored


def _attach_photos(item: GalleryItem, filenames: list[str]) -> None:
    for filename in filenames:
        item.photos.append(GalleryPhoto(file_path=filename))


def _abandon_pending_item(db: Session, item_id: int) -> None:
    """대기 상태 항목 행 삭제 (실패해도 시작 시 복구에서 정리됨)"""
    try:
        db.query(GalleryItem)\
            .filter(GalleryItem.id == item_id, GalleryItem.status == GalleryItemStatus.PENDING)\
            .delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"대기 상태 항목 삭제 실패 (복구 대상): {item_id} - {e}")


def create_item(
    db: Session,
    title: str,
    description: str | None = None,
    uploads: Iterable | None = None,
    config: UploadConfig | None = None
) -> GalleryItem:
    """
    갤러리 항목 생성 (사진 포함)
    1. 모든 파일 검증
    2. 항목을 pending 상태로 저장해 ID 확보
    3. 파일마다 원본 저장 → 썸네일 생성
    4. 사진 행 추가 + committed 전환을 한 트랜잭션으로 커밋
    실패하면 이번 요청에서 쓴 파일과 pending 행을 정리
    """
    config = config or visual_upload_config()
    title = _validate_title(title)
    uploads = list(uploads or [])
    _validate_all(uploads, config)

    item = GalleryItem(
        title=title,
        description=description or "",
        status=GalleryItemStatus.PENDING
    )
    try:
        db.add(item)
        db.commit()
        db.refresh(item)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"갤러리 항목 저장 실패: {e}")
        raise errors.ConsistencyError("갤러리 항목을 저장하지 못했습니다") from e

    item_id = item.id
    directory = storage_service.item_dir(item_id)

    try:
        filenames = _store_uploads(directory, uploads, config)
    except errors.StorageError:
        _abandon_pending_item(db, item_id)
        raise

    try:
        _attach_photos(item, filenames)
        item.status = GalleryItemStatus.COMMITTED
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"사진 정보 저장 실패, 파일 {len(filenames)}개 되돌림: item {item_id} - {e}")
        _discard(directory, filenames, config.profiles)
        _abandon_pending_item(db, item_id)
        raise errors.ConsistencyError("사진 정보를 저장하지 못했습니다") from e

    db.refresh(item)
    logger.info(f"갤러리 항목 생성: {item_id} (사진 {len(filenames)}장)")
    return item


def update_item(
    db: Session,
    item_id: int,
    title: str | None = None,
    description: str | None = None,
    uploads: Iterable | None = None,
    config: UploadConfig | None = None
) -> GalleryItem:
    """
    제목/설명 수정 + 새 사진 추가
    None인 필드는 그대로 두고, 기존 사진은 건드리지 않음
    """
    config = config or visual_upload_config()
    item = get_item(db, item_id)

    if title is not None:
        title = _validate_title(title)
    uploads = list(uploads or [])
    _validate_all(uploads, config)

    directory = storage_service.item_dir(item.id)
    filenames = _store_uploads(directory, uploads, config)

    try:
        if title is not None:
            item.title = title
        if description is not None:
            item.description = description
        item.updated_at = func.now()
        _attach_photos(item, filenames)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"갤러리 항목 수정 실패, 새 파일 {len(filenames)}개 되돌림: item {item_id} - {e}")
        _discard(directory, filenames, config.profiles)
        raise errors.ConsistencyError("갤러리 항목을 수정하지 못했습니다") from e

    db.refresh(item)
    logger.info(f"갤러리 항목 수정: {item_id} (새 사진 {len(filenames)}장)")
    return item


def add_photos(db: Session, item_id: int, uploads: Iterable, config: UploadConfig | None = None) -> GalleryItem:
    """기존 항목에 사진만 추가"""
    return update_item(db, item_id, uploads=uploads, config=config)


def delete_item(db: Session, item_id: int) -> None:
    """
    갤러리 항목 삭제
    DB 커밋이 먼저, 파일 정리는 그다음 (정리 실패는 로그만)
    """
    item = get_item(db, item_id)
    filenames = [photo.file_path for photo in item.photos]

    try:
        db.delete(item)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"갤러리 항목 삭제 실패: {item_id} - {e}")
        raise errors.ConsistencyError("갤러리 항목을 삭제하지 못했습니다") from e

    logger.info(f"갤러리 항목 삭제: {item_id} (사진 {len(filenames)}장)")

    try:
        cleanup_service.remove_item_files(item_id, filenames)
    except OSError as e:
        logger.error(f"파일 정리 실패 (DB는 삭제됨, 고아 디렉토리): item {item_id} - {e}")


def delete_photo(db: Session, item_id: int, photo_id: int, profiles: Iterable[ThumbnailProfile] | None = None) -> None:
    """사진 한 장 삭제 (행 삭제 후 원본/썸네일 정리)"""
    get_item(db, item_id)

    photo = db.query(GalleryPhoto).filter(GalleryPhoto.id == photo_id).first()
    if not photo:
        raise errors.NotFoundError("사진을 찾을 수 없습니다")

    if photo.item_id != item_id:
        logger.warning(
            f"다른 항목의 사진 삭제 시도: photo {photo_id}, 요청 항목 {item_id}, 실제 항목 {photo.item_id}"
        )
        raise errors.NotFoundError("해당 항목의 사진이 아닙니다")

    filename = photo.file_path
    try:
        db.delete(photo)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"사진 삭제 실패: {photo_id} - {e}")
        raise errors.ConsistencyError("사진을 삭제하지 못했습니다") from e

    try:
        cleanup_service.discard_photo_files(
            storage_service.item_dir(item_id),
            [filename],
            profiles or thumbnail_profiles()
        )
    except OSError as e:
        logger.warning(f"사진 파일 정리 실패 (DB 행은 삭제됨): {filename} - {e}")

    logger.info(f"사진 삭제: {photo_id} (항목 {item_id})")


def reconcile_item_thumbnails(
    db: Session,
    item_id: int,
    profiles: Iterable[ThumbnailProfile] | None = None
) -> dict[str, list[str]]:
    """빠진 썸네일만 다시 생성, {파일명 → 다시 만든 프로필} 반환"""
    item = get_item(db, item_id)
    profiles = list(profiles or thumbnail_profiles())
    directory = storage_service.item_dir(item.id)

    regenerated = {}
    for photo in item.photos:
        derived = thumbnail_service.reconcile_thumbnails(directory / photo.file_path, profiles)
        if derived:
            regenerated[photo.file_path] = sorted(derived)
    return regenerated


def _as_utc(value: datetime) -> datetime:
    # SQLite는 타임존 없이 UTC로 저장
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def recover_pending_items(db: Session, older_than: timedelta | None = None) -> list[int]:
    """
    중단된 생성 요청이 남긴 pending 항목과 디렉토리 정리
    older_than이 없으면 모든 pending 항목 대상 (요청 처리 중이 아닐 때만 사용)
    """
    pending = db.query(GalleryItem).filter(GalleryItem.status == GalleryItemStatus.PENDING).all()
    if older_than is not None:
        cutoff = datetime.now(timezone.utc) - older_than
        pending = [item for item in pending if item.created_at and _as_utc(item.created_at) < cutoff]

    recovered = []
    for item in pending:
        try:
            cleanup_service.remove_directory(storage_service.item_dir(item.id))
        except OSError as e:
            logger.error(f"pending 항목 디렉토리 삭제 실패: {item.id} - {e}")
            continue
        db.delete(item)
        recovered.append(item.id)

    if recovered:
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"pending 항목 정리 실패: {e}")
            raise errors.ConsistencyError("pending 항목을 정리하지 못했습니다") from e
        logger.info(f"pending 항목 {len(recovered)}개 정리: {recovered}")

    return recovered


def sweep_orphan_directories(db: Session) -> list[Path]:
    """DB 행이 없는 항목 디렉토리 삭제 (삭제 후 파일 정리가 실패했던 경우)"""
    root = storage_service.visuals_root()
    if not root.exists():
        return []

    known_ids = {row.id for row in db.query(GalleryItem.id).all()}
    removed = []
    for directory in root.iterdir():
        if not directory.is_dir() or not directory.name.isdigit():
            continue
        if int(directory.name) in known_ids:
            continue
        try:
            cleanup_service.remove_directory(directory)
        except OSError as e:
            logger.error(f"고아 디렉토리 삭제 실패: {directory} - {e}")
            continue
        removed.append(directory)

    if removed:
        logger.info(f"고아 디렉토리 {len(removed)}개 삭제")
    return removed
