# app/config.py
from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""

    # API 기본 설정
    app_name: str = "Folio API"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./data/folio.db"

    # 미디어 저장소 (StaticFiles로 서빙되는 루트)
    media_root: str = "data/serve"
    public_mount: str = "/fs"

    # 로그
    log_dir: str = "logs"

    # 업로드 제한
    max_request_bytes: int = 320 * 1024 * 1024
    photo_max_bytes: int = 20 * 1024 * 1024
    cover_max_bytes: int = 20 * 1024 * 1024
    portfolio_max_bytes: int = 10_000_000
    thumbnail_quality: int = 80

    # 세션
    session_cookie_name: str = "session"
    session_expire_minutes: int = 60 * 24 * 7

    # 오너 계정 (시작 시 없으면 생성)
    owner_email: str = ""
    owner_password_hash: str = ""

    @field_validator('public_mount')
    def validate_public_mount(cls, v):
        if not v.startswith("/"):
            raise ValueError('PUBLIC_MOUNT는 /로 시작해야 합니다')
        v = v.rstrip("/")
        if not v:
            # 루트에 마운트하면 API 경로를 가림
            raise ValueError('PUBLIC_MOUNT는 / 하나일 수 없습니다')
        return v

    @field_validator('thumbnail_quality')
    def validate_thumbnail_quality(cls, v):
        if not 0 <= v <= 100:
            raise ValueError('THUMBNAIL_QUALITY는 0~100 사이여야 합니다')
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()
