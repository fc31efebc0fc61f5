# app/schemas/site.py
from pydantic import BaseModel

class CoverResponse(BaseModel):
    """커버 이미지 경로"""
    original: str
    large: str
    medium: str

class PortfolioUploadResponse(BaseModel):
    """포트폴리오 업로드 응답"""
    id: int
    url: str
