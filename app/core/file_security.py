# app/core/file_security.py
import os
from typing import BinaryIO

from app.core import errors
from app.core.logger import logger
from app.core.upload_config import UploadConfig

# 타입 판별에 사용하는 앞부분 길이
SNIFF_LENGTH = 512

# (시그니처, MIME) - 앞에서부터 순서대로 비교
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
)

# 텍스트 파일에는 나오지 않는 제어 문자
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


def sniff_content_type(head: bytes) -> str:
    """파일 앞부분 바이트로 실제 MIME 타입 판별 (클라이언트 Content-Type은 보지 않음)"""
    head = head[:SNIFF_LENGTH]

    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"

    for signature, mime_type in _SIGNATURES:
        if head.startswith(signature):
            return mime_type

    if any(b in _BINARY_BYTES for b in head):
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


def get_stream_size(stream: BinaryIO) -> int:
    """스트림 크기 (위치는 처음으로 되돌림)"""
    stream.seek(0, 2)  # 파일 끝으로 이동
    size = stream.tell()  # 현재 위치 = 파일 크기
    stream.seek(0)  # 다시 처음으로
    return size


def validate_upload(upload, config: UploadConfig) -> str:
    """
    업로드 파일 검증 후 판별된 MIME 타입 반환
    - 앞 512바이트로 타입 판별 → 허용 목록 확인
    - 크기 확인
    - 성공 시 스트림 위치를 처음으로 되돌림 (안 하면 저장 파일 앞부분이 잘림)
    """
    stream = upload.file
    filename = upload.filename or ""

    try:
        stream.seek(0)
        head = stream.read(SNIFF_LENGTH)
    except OSError as e:
        logger.warning(f"업로드 파일 읽기 실패: {filename} - {e}")
        raise errors.ValidationError("업로드 파일을 읽을 수 없습니다") from e

    if not head:
        raise errors.ValidationError(f"빈 파일은 업로드할 수 없습니다: {filename}")

    content_type = sniff_content_type(head)
    if content_type not in config.allowed_types:
        logger.info(f"허용되지 않은 파일 형식: {filename} ({content_type})")
        raise errors.ValidationError(
            f"허용되지 않은 파일 형식입니다. 업로드한 타입: {content_type}"
        )

    size = get_stream_size(stream)
    if size > config.max_size:
        logger.info(f"파일 크기 초과: {filename} ({size} bytes)")
        raise errors.ValidationError(
            f"파일 크기가 너무 큽니다. 최대: {config.max_size} bytes"
        )

    stream.seek(0)
    return content_type


def safe_extension(filename: str | None) -> str:
    """
    원본 파일명의 확장자 (점 포함, 대소문자 유지)
    - 경로는 버리고 마지막 점 뒤만 사용 (".jpg" 같은 이름도 ".jpg")
    - 알파벳, 숫자만 남기고 비면 ""
    """
    basename = os.path.basename((filename or "").replace("\\", "/"))
    _, dot, ext = basename.rpartition(".")
    if not dot:
        return ""

    safe_ext = "".join(c for c in ext if c.isascii() and c.isalnum())
    return f".{safe_ext}" if safe_ext else ""
