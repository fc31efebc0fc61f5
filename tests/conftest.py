"""
Shared pytest fixtures.

DB/미디어/로그 경로는 app을 import하기 전에 환경변수로 임시 디렉토리를 가리키게 한다.
"""

import io
import os
import tempfile
from pathlib import Path

_TMP_DIR = tempfile.mkdtemp(prefix="folio-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_TMP_DIR, "serve")
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["OWNER_EMAIL"] = ""
os.environ["OWNER_PASSWORD_HASH"] = ""

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from PIL import Image
from starlette.datastructures import Headers, UploadFile

from app.config import settings
from app.core.security import hash_password
from app.database import Base, SessionLocal, engine, init_db
from app.models.user import User
from main import app

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def media_root(tmp_path, monkeypatch) -> Path:
    """테스트마다 빈 미디어 루트"""
    root = tmp_path / "serve"
    root.mkdir()
    monkeypatch.setattr(settings, "media_root", str(root))
    return root


@pytest.fixture(autouse=True)
def reset_database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_bytes():
    """Pillow로 테스트 이미지 생성"""
    def _make(size=(800, 600), fmt="JPEG", color=(200, 80, 40), mode="RGB", exif_orientation=None):
        image = Image.new(mode, size, color)
        buffer = io.BytesIO()
        kwargs = {}
        if exif_orientation is not None:
            exif = Image.Exif()
            exif[0x0112] = exif_orientation
            kwargs["exif"] = exif.tobytes()
        image.save(buffer, format=fmt, **kwargs)
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_upload():
    """서비스 함수에 넘길 UploadFile"""
    def _make(data: bytes, filename="photo.jpg", content_type="image/jpeg"):
        return UploadFile(
            file=io.BytesIO(data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )
    return _make


@pytest.fixture
def log_messages():
    """loguru 메시지 수집"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def owner(db):
    user = User(email=OWNER_EMAIL, password_digest=hash_password(OWNER_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner_client(client, owner):
    """로그인된 클라이언트"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD},
    )
    assert response.status_code == 200
    return client
