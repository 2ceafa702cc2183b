"""
로컬 디스크 저장소 헬퍼
업로드 파일(UploadFile)의 크기 계산, 디스크 저장, 삭제
"""
import logging
import os
import shutil
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """
    디렉토리가 없으면 생성, 실패하면 예외를 그대로 전파 (애플리케이션 시작 중단)
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"저장소 디렉토리 생성 실패 ({path}): {e}")
        raise RuntimeError(f"Could not create storage directory: {path}") from e
    return path


def upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def client_filename(file: UploadFile) -> str:
    """클라이언트가 보낸 파일명에서 경로를 제거한 마지막 요소 (없으면 빈 문자열)"""
    name = (file.filename or "").strip()
    return name.replace("\\", "/").split("/")[-1]


def _copy_to(file: UploadFile, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    file.file.seek(0)
    with open(target, "wb") as out:
        shutil.copyfileobj(file.file, out)


async def save_upload(file: UploadFile, target: Path) -> None:
    """블로킹 파일 복사는 스레드풀에서 실행"""
    await run_in_threadpool(_copy_to, file, target)


def remove_file(path: Path) -> bool:
    """삭제 실패는 로그만 남기고 False"""
    try:
        Path(path).unlink(missing_ok=True)
        return True
    except OSError as e:
        logger.warning(f"파일 삭제 실패 ({path}): {e}")
        return False
