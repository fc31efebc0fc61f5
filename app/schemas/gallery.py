# app/schemas/gallery.py
from pydantic import BaseModel
from datetime import datetime

class GalleryItemResponse(BaseModel):
    """갤러리 항목 응답"""
    id: int
    title: str
    description: str
    created_at: datetime | None
    updated_at: datetime | None
    photo_count: int = 0

class GalleryItemCreatedResponse(BaseModel):
    """갤러리 항목 생성 응답"""
    id: int
    url: str
    photo_count: int

class PhotoResponse(BaseModel):
    """사진 응답 (썸네일은 프로필 이름 → 공개 경로)"""
    id: int
    filename: str
    url: str
    thumbnails: dict[str, str]
    created_at: datetime | None

class PaginationMeta(BaseModel):
    total: int
    per_page: int
    current_page: int
    total_pages: int

class PhotoPageResponse(BaseModel):
    """사진 목록 응답"""
    photos: list[PhotoResponse]
    pagination: PaginationMeta

class ThumbnailReconcileResponse(BaseModel):
    """썸네일 복구 결과 {파일명 → 다시 만든 프로필}"""
    item_id: int
    regenerated: dict[str, list[str]]
