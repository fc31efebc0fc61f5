# app/core/security.py
import bcrypt


def hash_password(password: str) -> str:
    """비밀번호 bcrypt 해시"""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """비밀번호 검증 (해시 형식이 깨졌으면 False)"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
