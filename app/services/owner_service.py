# app/services/owner_service.py
from sqlalchemy.orm import Session

from app.core.logger import logger
from app.core.security import verify_password
from app.models.user import User


def authenticate(db: Session, email: str, password: str) -> User | None:
    """이메일/비밀번호 확인, 실패하면 None"""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_digest):
        return None
    return user


def ensure_owner(db: Session, email: str, password_hash: str) -> User | None:
    """설정된 오너 계정이 없으면 생성"""
    if not email or not password_hash:
        return None

    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(email=email, password_digest=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"오너 계정 생성: {email}")
    return user
