# app/models/site.py
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from app.database import Base

class Cover(Base):
    """커버 이미지 모델 (가장 최근 행이 현재 커버)"""
    __tablename__ = "covers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_path = Column(String, nullable=False, unique=True)  # covers/ 기준 파일명
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Cover {self.file_path}>"

class Portfolio(Base):
    """포트폴리오 문서 모델 (가장 최근 행이 현재 문서)"""
    __tablename__ = "portfolios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_path = Column(String, nullable=False, unique=True)  # portfolios/ 기준 파일명
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Portfolio {self.file_path}>"
