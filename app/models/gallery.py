# app/models/gallery.py
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import enum

class GalleryItemStatus(str, enum.Enum):
    """갤러리 항목 상태"""
    PENDING = "pending"      # 파일 저장 중 (조회 대상 아님)
    COMMITTED = "committed"  # 사진 행까지 저장 완료

class GalleryItem(Base):
    """갤러리 항목(visual) 모델"""
    __tablename__ = "gallery_items"
    # SQLite에서도 삭제된 ID를 재사용하지 않음 (디렉토리가 ID 기준)
    __table_args__ = {"sqlite_autoincrement": True}

    # 기본 필드
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    # 상태 (쓰기 전 마커)
    status = Column(
        SQLEnum(GalleryItemStatus),
        nullable=False,
        default=GalleryItemStatus.PENDING,
        index=True
    )

    # 타임스탬프
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 관계 (삭제는 DB의 ON DELETE CASCADE에 맡김)
    photos = relationship(
        "GalleryPhoto",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GalleryPhoto.id"
    )

    def __repr__(self):
        return f"<GalleryItem {self.id} {self.title} - {self.status}>"

class GalleryPhoto(Base):
    """갤러리 사진 모델"""
    __tablename__ = "gallery_photos"

    # 기본 필드
    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(
        Integer,
        ForeignKey("gallery_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # 저장 파일명 (디렉토리는 item_id로 결정)
    file_path = Column(String, nullable=False)

    # 타임스탬프
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # 관계
    item = relationship("GalleryItem", back_populates="photos")

    def __repr__(self):
        return f"<GalleryPhoto {self.file_path}>"
