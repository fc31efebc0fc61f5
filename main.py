# main.py
import os
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.api.routes import auth, visuals, site
from app.core.errors import MediaError
from app.core.logging_middleware import log_requests
from app.core.logger import logger
from app.core.session_store import InMemorySessionStore
from app.database import SessionLocal, init_db
from app.services import gallery_service, owner_service

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug
)

# 세션 저장소 (핸들러에는 의존성으로 주입)
app.state.session_store = InMemorySessionStore()

# ===== 로깅 미들웨어 추가 (가장 먼저) =====
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    return await log_requests(request, call_next)
# ==========================================

# 요청 크기 제한 미들웨어
@app.middleware("http")
async def limit_upload_size(request: Request, call_next):
    """요청 크기 제한"""
    if request.method in ["POST", "PUT", "PATCH"]:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.max_request_bytes:
            return JSONResponse(
                status_code=413,
                content={"detail": f"요청 크기가 너무 큽니다. 최대: {settings.max_request_bytes // 1024 // 1024}MB"}
            )
    return await call_next(request)

# 미디어 파이프라인 에러 → JSON 응답
@app.exception_handler(MediaError)
async def media_error_handler(request: Request, exc: MediaError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# CORS 설정
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(auth.router)
app.include_router(visuals.router)
app.include_router(site.router)

# 정적 파일 서빙 (원본 + 썸네일)
os.makedirs(settings.media_root, exist_ok=True)
app.mount(settings.public_mount, StaticFiles(directory=settings.media_root), name="media")

# ===== 시작 로그 추가 =====
@app.on_event("startup")
async def startup_event():
    logger.info("Folio API 서버 시작")
    init_db()

    db = SessionLocal()
    try:
        owner_service.ensure_owner(db, settings.owner_email, settings.owner_password_hash)
        # 이전 프로세스가 남긴 pending 항목 / 고아 디렉토리 정리
        gallery_service.recover_pending_items(db)
        gallery_service.sweep_orphan_directories(db)
    finally:
        db.close()

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Folio API 서버 종료")
# ==========================

@app.get("/health")
def health_check():
    """헬스체크"""
    return {
        "status": "healthy",
        "service": settings.app_name
    }
