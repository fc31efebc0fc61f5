# app/core/errors.py
from fastapi import status


class MediaError(Exception):
    """미디어 파이프라인 에러 기본 클래스"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "요청을 처리하지 못했습니다"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(MediaError):
    """허용되지 않은 형식 / 용량 초과 (클라이언트 에러, 재시도 없음)"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "업로드 파일이 올바르지 않습니다"


class NotFoundError(MediaError):
    """존재하지 않는 항목/사진"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "찾을 수 없습니다"


class StorageError(MediaError):
    """디렉토리 생성 또는 파일 복사 실패"""
    default_detail = "파일을 저장하지 못했습니다"


class ConsistencyError(MediaError):
    """파일 저장 후 DB 쓰기 실패"""
    default_detail = "데이터베이스에 저장하지 못했습니다"


class DerivationError(MediaError):
    """썸네일 생성 실패 (로그만 남기고 응답에는 노출하지 않음)"""
    default_detail = "썸네일을 생성하지 못했습니다"
