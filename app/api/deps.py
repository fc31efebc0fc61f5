# app/api/deps.py
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.session_store import SessionStore
from app.database import get_db
from app.models.user import User


def get_session_store(request: Request) -> SessionStore:
    """앱 시작 시 등록한 세션 저장소"""
    return request.app.state.session_store


def get_owner_id(
    request: Request,
    store: SessionStore = Depends(get_session_store)
) -> int | None:
    """세션 쿠키로 로그인한 오너 ID 조회 (없으면 None)"""
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        return None
    return store.get(session_id)


def get_current_owner(
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db)
) -> User:
    """로그인한 오너 (쓰기 요청용)"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="로그인이 필요합니다",
    )

    if owner_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == owner_id).first()
    if user is None:
        raise credentials_exception

    return user
