# app/services/site_service.py
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import errors
from app.core.file_security import validate_upload
from app.core.logger import logger
from app.core.upload_config import cover_upload_config, portfolio_upload_config
from app.models.site import Cover, Portfolio
from app.services import cleanup_service, storage_service, thumbnail_service

# 커버 화면에 쓰는 썸네일 프로필
COVER_DISPLAY_PROFILES = ("large", "medium")


def covers_dir() -> Path:
    return storage_service.media_root() / storage_service.COVERS_DIRNAME


def portfolios_dir() -> Path:
    return storage_service.media_root() / storage_service.PORTFOLIOS_DIRNAME


def upload_cover(db: Session, upload) -> Cover:
    """커버 이미지 업로드 (검증 → 저장 → 썸네일 → DB)"""
    config = cover_upload_config()
    validate_upload(upload, config)

    path = storage_service.store_file(upload.file, covers_dir(), upload.filename)
    thumbnail_service.derive_thumbnails(path, config.profiles)

    cover = Cover(file_path=path.name)
    try:
        db.add(cover)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"커버 저장 실패, 파일 되돌림: {path.name} - {e}")
        try:
            cleanup_service.discard_photo_files(path.parent, [path.name], config.profiles)
        except OSError as cleanup_error:
            logger.error(f"고아 파일 정리 실패 (수동 정리 필요): {path} - {cleanup_error}")
        raise errors.ConsistencyError("커버 정보를 저장하지 못했습니다") from e

    db.refresh(cover)
    logger.info(f"커버 변경: {cover.file_path}")
    return cover


def latest_cover(db: Session) -> Cover:
    cover = db.query(Cover).order_by(Cover.created_at.desc(), Cover.id.desc()).first()
    if not cover:
        raise errors.NotFoundError("커버 이미지가 없습니다")
    return cover


def cover_paths(cover: Cover) -> dict:
    """원본 + 화면용 썸네일 공개 경로"""
    relative = f"{storage_service.COVERS_DIRNAME}/{cover.file_path}"
    profiles = [p for p in cover_upload_config().profiles if p.name in COVER_DISPLAY_PROFILES]
    thumbnails = thumbnail_service.public_thumbnail_paths(relative, profiles)
    return {
        "original": storage_service.public_path(relative),
        "large": thumbnails["large"],
        "medium": thumbnails["medium"],
    }


def upload_portfolio(db: Session, upload) -> Portfolio:
    """포트폴리오 문서 업로드 (PDF만)"""
    validate_upload(upload, portfolio_upload_config())

    path = storage_service.store_file(upload.file, portfolios_dir(), upload.filename)

    portfolio = Portfolio(file_path=path.name)
    try:
        db.add(portfolio)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"포트폴리오 저장 실패, 파일 되돌림: {path.name} - {e}")
        path.unlink(missing_ok=True)
        raise errors.ConsistencyError("포트폴리오 정보를 저장하지 못했습니다") from e

    db.refresh(portfolio)
    logger.info(f"포트폴리오 변경: {portfolio.file_path}")
    return portfolio


def latest_portfolio_path(db: Session) -> Path:
    """최신 포트폴리오 파일 경로 (DB 행이나 파일이 없으면 NotFound)"""
    portfolio = db.query(Portfolio)\
        .order_by(Portfolio.created_at.desc(), Portfolio.id.desc())\
        .first()
    if not portfolio:
        raise errors.NotFoundError("포트폴리오가 없습니다")

    path = portfolios_dir() / portfolio.file_path
    if not path.is_file():
        logger.error(f"포트폴리오 파일 없음: {path}")
        raise errors.NotFoundError("포트폴리오 파일을 찾을 수 없습니다")
    return path
