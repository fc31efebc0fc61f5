# app/core/upload_config.py
from pydantic import BaseModel, Field

from app.config import settings


class ThumbnailProfile(BaseModel):
    """썸네일 사이즈 프로필"""
    name: str
    dimension: int = Field(gt=0)  # crop이면 정사각형 한 변, 아니면 가로 폭
    quality: int = Field(default=80, ge=0, le=100)  # JPEG 품질
    crop: bool = False

    class Config:
        frozen = True


class UploadConfig(BaseModel):
    """업로드 정책 (허용 타입, 최대 크기, 썸네일 프로필)"""
    allowed_types: frozenset[str]
    max_size: int = Field(gt=0)
    profiles: tuple[ThumbnailProfile, ...] = ()

    class Config:
        frozen = True


IMAGE_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
})

PORTFOLIO_MIME_TYPES = frozenset({"application/pdf"})


def thumbnail_profiles() -> tuple[ThumbnailProfile, ...]:
    """mini(정사각 크롭) → small → medium → large 순서"""
    quality = settings.thumbnail_quality
    return (
        ThumbnailProfile(name="mini", dimension=40, quality=quality, crop=True),
        ThumbnailProfile(name="small", dimension=150, quality=quality),
        ThumbnailProfile(name="medium", dimension=600, quality=quality),
        ThumbnailProfile(name="large", dimension=1080, quality=quality),
    )


def visual_upload_config() -> UploadConfig:
    """갤러리(visual) 사진 업로드 정책"""
    return UploadConfig(
        allowed_types=IMAGE_MIME_TYPES,
        max_size=settings.photo_max_bytes,
        profiles=thumbnail_profiles(),
    )


def cover_upload_config() -> UploadConfig:
    """커버 이미지 업로드 정책"""
    return UploadConfig(
        allowed_types=IMAGE_MIME_TYPES,
        max_size=settings.cover_max_bytes,
        profiles=thumbnail_profiles(),
    )


def portfolio_upload_config() -> UploadConfig:
    """포트폴리오 문서 업로드 정책 (썸네일 없음)"""
    return UploadConfig(
        allowed_types=PORTFOLIO_MIME_TYPES,
        max_size=settings.portfolio_max_bytes,
    )
