# app/core/logging_middleware.py
from fastapi import Request
from app.config import settings
from app.core.logger import logger
import time


def _is_static(path: str) -> bool:
    """정적 파일(원본/썸네일) 요청인지"""
    return path == settings.public_mount or path.startswith(f"{settings.public_mount}/")


async def log_requests(request: Request, call_next):
    """API 요청/응답 로깅 (정적 파일 요청은 DEBUG)"""
    start_time = time.perf_counter()
    path = request.url.path
    quiet = _is_static(path)

    # 업로드 요청은 본문 크기도 기록
    size = request.headers.get("content-length")
    if not quiet:
        suffix = f" ({size} bytes)" if size and request.method in ("POST", "PATCH") else ""
        logger.info(f"➡️  {request.method} {path}{suffix}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = (time.perf_counter() - start_time) * 1000
        logger.error(f"❌ {request.method} {path} - Error: {e} - Time: {elapsed:.2f}ms")
        logger.exception("Exception details:")
        raise

    elapsed = (time.perf_counter() - start_time) * 1000
    message = f"⬅️  {request.method} {path} - Status: {response.status_code} - Time: {elapsed:.2f}ms"
    if quiet:
        logger.debug(message)
    elif response.status_code >= 400:
        # 검증 실패/권한 없음 등
        logger.warning(message)
    else:
        logger.info(message)

    return response
