# app/api/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_owner_id, get_session_store
from app.config import settings
from app.core.logger import logger
from app.core.session_store import SessionStore
from app.database import get_db
from app.schemas.user import LoginStatus, OwnerLogin
from app.services import owner_service

router = APIRouter(prefix="/api/v1/auth", tags=["인증"])

@router.post("/login", response_model=LoginStatus)
def login(
    data: OwnerLogin,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store)
):
    """로그인 (세션 쿠키 발급)"""
    user = owner_service.authenticate(db, data.email, data.password)
    if not user:
        logger.warning(f"로그인 실패: {data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="이메일 또는 비밀번호가 올바르지 않습니다"
        )

    ttl = settings.session_expire_minutes * 60
    session_id = store.create(user.id, ttl)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=ttl,
        httponly=True,
        samesite="lax"
    )
    return {"logged_in": True}

@router.post("/logout", response_model=LoginStatus)
def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store)
):
    """로그아웃 (세션 삭제)"""
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        store.delete(session_id)
    response.delete_cookie(settings.session_cookie_name)
    return {"logged_in": False}

@router.get("/status", response_model=LoginStatus)
def login_status(owner_id: int | None = Depends(get_owner_id)):
    """로그인 여부"""
    return {"logged_in": owner_id is not None}
