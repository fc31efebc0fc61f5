# app/api/routes/visuals.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_owner
from app.core import errors
from app.core.pagination import build_pagination, normalize_page
from app.core.upload_config import thumbnail_profiles
from app.database import get_db
from app.models.gallery import GalleryItem, GalleryPhoto
from app.models.user import User
from app.schemas.gallery import (
    GalleryItemCreatedResponse,
    GalleryItemResponse,
    PhotoPageResponse,
    PhotoResponse,
    ThumbnailReconcileResponse,
)
from app.services import gallery_service, storage_service, thumbnail_service

router = APIRouter(prefix="/api/v1/visuals", tags=["갤러리"])

# 한 요청당 업로드 가능한 사진 수
MAX_PHOTOS_PER_REQUEST = 50


def _item_response(item: GalleryItem) -> GalleryItemResponse:
    return GalleryItemResponse(
        id=item.id,
        title=item.title,
        description=item.description,
        created_at=item.created_at,
        updated_at=item.updated_at,
        photo_count=len(item.photos)
    )


def _photo_response(item_id: int, photo: GalleryPhoto, profiles) -> PhotoResponse:
    relative = f"{storage_service.VISUALS_DIRNAME}/{item_id}/{photo.file_path}"
    return PhotoResponse(
        id=photo.id,
        filename=photo.file_path,
        url=storage_service.public_path(relative),
        thumbnails=thumbnail_service.public_thumbnail_paths(relative, profiles),
        created_at=photo.created_at
    )


def _check_photo_count(photos: list[UploadFile]) -> None:
    if len(photos) > MAX_PHOTOS_PER_REQUEST:
        raise errors.ValidationError(f"한 번에 최대 {MAX_PHOTOS_PER_REQUEST}장까지 업로드 가능합니다")


@router.get("", response_model=list[GalleryItemResponse])
def list_visuals(db: Session = Depends(get_db)):
    """갤러리 항목 목록"""
    return [_item_response(item) for item in gallery_service.list_items(db)]


@router.post("", response_model=GalleryItemCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_visual(
    title: str = Form(""),
    description: str = Form(""),
    photos: list[UploadFile] | None = File(None),
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """갤러리 항목 생성 (사진 여러 장 포함 가능)"""
    photos = photos or []
    _check_photo_count(photos)

    item = gallery_service.create_item(db, title, description, photos)
    return GalleryItemCreatedResponse(
        id=item.id,
        url=f"{router.prefix}/{item.id}",
        photo_count=len(item.photos)
    )


@router.get("/{item_id}", response_model=GalleryItemResponse)
def get_visual(item_id: int, db: Session = Depends(get_db)):
    """갤러리 항목 조회"""
    return _item_response(gallery_service.get_item(db, item_id))


@router.patch("/{item_id}", response_model=GalleryItemResponse)
def update_visual(
    item_id: int,
    title: str | None = Form(None),
    description: str | None = Form(None),
    photos: list[UploadFile] | None = File(None),
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """제목/설명 수정 + 사진 추가"""
    photos = photos or []
    _check_photo_count(photos)

    item = gallery_service.update_item(db, item_id, title, description, photos)
    return _item_response(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_visual(
    item_id: int,
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """갤러리 항목 삭제 (사진/파일 포함)"""
    gallery_service.delete_item(db, item_id)
    return None


@router.get("/{item_id}/photos", response_model=PhotoPageResponse)
def get_visual_photos(
    item_id: int,
    page: int | None = Query(None, description="페이지 번호"),
    per_page: int | None = Query(None, description="페이지당 개수 (최대 100)"),
    db: Session = Depends(get_db)
):
    """항목의 사진 목록 (페이지네이션, 썸네일 경로 포함)"""
    page, per_page = normalize_page(page, per_page)
    photos, total = gallery_service.list_photos(db, item_id, page, per_page)

    profiles = thumbnail_profiles()
    return PhotoPageResponse(
        photos=[_photo_response(item_id, photo, profiles) for photo in photos],
        pagination=build_pagination(total, page, per_page)
    )


@router.post("/{item_id}/photos", response_model=GalleryItemResponse, status_code=status.HTTP_201_CREATED)
def add_visual_photos(
    item_id: int,
    photos: list[UploadFile] = File(...),
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """기존 항목에 사진 추가"""
    _check_photo_count(photos)

    item = gallery_service.add_photos(db, item_id, photos)
    return _item_response(item)


@router.delete("/{item_id}/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_visual_photo(
    item_id: int,
    photo_id: int,
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """사진 한 장 삭제"""
    gallery_service.delete_photo(db, item_id, photo_id)
    return None


@router.post("/{item_id}/thumbnails/reconcile", response_model=ThumbnailReconcileResponse)
def reconcile_visual_thumbnails(
    item_id: int,
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """빠진 썸네일만 다시 생성"""
    regenerated = gallery_service.reconcile_item_thumbnails(db, item_id)
    return ThumbnailReconcileResponse(item_id=item_id, regenerated=regenerated)
