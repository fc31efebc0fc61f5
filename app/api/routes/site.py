# app/api/routes/site.py
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.api.deps import get_current_owner
from app.core.upload_config import thumbnail_profiles
from app.database import get_db
from app.models.user import User
from app.schemas.site import CoverResponse, PortfolioUploadResponse
from app.services import site_service, storage_service, thumbnail_service

router = APIRouter(prefix="/api/v1", tags=["사이트"])

@router.get("/cover", response_model=CoverResponse)
def get_cover(db: Session = Depends(get_db)):
    """현재 커버 이미지 경로 (원본, large, medium)"""
    return site_service.cover_paths(site_service.latest_cover(db))

@router.post("/cover", response_model=CoverResponse, status_code=status.HTTP_201_CREATED)
def upload_cover(
    cover: UploadFile = File(...),
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """커버 이미지 변경"""
    return site_service.cover_paths(site_service.upload_cover(db, cover))

@router.get("/portfolio")
def get_portfolio(db: Session = Depends(get_db)):
    """최신 포트폴리오 다운로드"""
    path = site_service.latest_portfolio_path(db)
    return FileResponse(path, media_type="application/pdf", filename=path.name)

@router.post("/portfolio", response_model=PortfolioUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_portfolio(
    portfolio: UploadFile = File(...),
    current_owner: User = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """포트폴리오 문서 변경 (PDF)"""
    saved = site_service.upload_portfolio(db, portfolio)
    relative = f"{storage_service.PORTFOLIOS_DIRNAME}/{saved.file_path}"
    return PortfolioUploadResponse(id=saved.id, url=storage_service.public_path(relative))

@router.get("/thumbnails", response_model=dict[str, str])
def get_thumbnail_paths(path: str | None = Query(None, description="media 루트 기준 원본 경로")):
    """저장된 원본의 썸네일 공개 경로 {프로필 → 경로}"""
    relative = storage_service.resolve_media_path(path)
    return thumbnail_service.public_thumbnail_paths(relative, thumbnail_profiles())
