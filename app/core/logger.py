# app/core/logger.py
from loguru import logger
import sys
import os

from app.config import settings

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def _is_media_record(record) -> bool:
    """저장/썸네일/정리 서비스에서 나온 로그"""
    return record["name"].startswith("app.services")


def setup_logging(log_dir: str, debug: bool = False) -> None:
    """loguru 싱크 구성 (콘솔 + 전체 파일 + 미디어 파일 + 에러 파일)"""
    os.makedirs(log_dir, exist_ok=True)

    # 기본 로거 제거
    logger.remove()

    # 콘솔 출력 (debug 모드면 DEBUG까지)
    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if debug else "INFO"
    )

    # 파일 출력 (모든 로그)
    logger.add(
        f"{log_dir}/folio.log",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        format=FILE_FORMAT,
        level="DEBUG"
    )

    # 미디어 파이프라인 (파일 저장, 썸네일, 고아 파일 정리)
    logger.add(
        f"{log_dir}/media.log",
        rotation="10 MB",
        retention="90 days",
        format=FILE_FORMAT,
        filter=_is_media_record,
        level="INFO"
    )

    # 에러 전용 파일 (수동 정리가 필요한 고아 파일 포함)
    logger.add(
        f"{log_dir}/error.log",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        format=FILE_FORMAT,
        level="ERROR"
    )


setup_logging(settings.log_dir, settings.debug)
