# app/schemas/user.py
from pydantic import BaseModel

class OwnerLogin(BaseModel):
    """로그인 요청"""
    email: str
    password: str

class LoginStatus(BaseModel):
    """로그인 상태 응답"""
    logged_in: bool
