# app/database.py
import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

_url = make_url(settings.database_url)
_engine_args = {}

if _url.get_backend_name() == "sqlite":
    # 요청 스레드가 여러 개라 같은 커넥션 공유 허용
    _engine_args["connect_args"] = {"check_same_thread": False}
    if _url.database and _url.database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(_url.database)), exist_ok=True)

# 데이터베이스 엔진 생성
engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # SQL 쿼리 로그 출력
    **_engine_args
)


if _url.get_backend_name() == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        """SQLite는 기본적으로 FK(ON DELETE CASCADE)가 꺼져 있음"""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# 세션 팩토리
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()

# DB 세션 의존성 (FastAPI에서 사용)
def get_db():
    """DB 세션 생성 및 종료"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """테이블 생성 (마이그레이션 없이 띄우는 개발/테스트 환경용)"""
    from app.models import gallery, site, user  # noqa: F401  모델 등록

    Base.metadata.create_all(bind=engine)
