"""
File Cleanup Scheduler
만료된 파일(저장 파일 + 메타데이터) 일일 정리
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from app.core.config import settings
from app.core.metrics import expired_files_deleted_total
from app.database import get_async_session_context
from app.repositories.file_metadata import FileMetadataRepository
from app.utils.datetime import seconds_until_next_hour_of_day, utc_now
from app.utils.storage import remove_file

logger = logging.getLogger(__name__)


class FileCleanupScheduler:
    """
    만료 파일 정리 스케줄러
    - 매일 CLEANUP_HOUR_UTC시(기본 자정, UTC)에 실행
    - expiry_date < now 인 파일 삭제
    - main.py lifespan에서 백그라운드 태스크로 실행됨
    """

    def __init__(self, session_factory: Callable = get_async_session_context,
                 storage_path: Optional[Path] = None, hour_utc: Optional[int] = None):
        self.session_factory = session_factory
        self.storage_path = Path(storage_path or settings.STORAGE_PATH)
        self.hour_utc = settings.CLEANUP_HOUR_UTC if hour_utc is None else hour_utc
        if not 0 <= self.hour_utc <= 23:
            raise ValueError(f"hour_utc must be in 0..23: {self.hour_utc}")
        self.repo = FileMetadataRepository()

    async def run(self):
        logger.info(f"File Cleanup Scheduler 시작 (매일 {self.hour_utc:02d}:00 UTC)")

        try:
            while True:
                delay = seconds_until_next_hour_of_day(self.hour_utc)
                logger.debug(f"다음 파일 정리까지 {delay:.0f}초")
                await asyncio.sleep(delay)

                try:
                    await self.cleanup_expired_files()
                except Exception as e:
                    # 한 번의 실패로 스케줄러가 멈추지 않도록 다음 주기까지 대기
                    logger.error(f"만료 파일 정리 오류: {e}", exc_info=True)

        except asyncio.CancelledError:
            logger.info("File Cleanup Scheduler 종료")
            raise

    async def cleanup_expired_files(self) -> int:
        """
        만료 파일 삭제, 삭제된 개수 반환
        """
        now = utc_now()
        logger.info(f"Starting cleanup of expired files at {now.isoformat()}")

        deleted = 0
        async with self.session_factory() as session:
            expired = await self.repo.get_expired_before(session, now)

            for metadata in expired:
                remove_file(self.storage_path / metadata.stored_filename)
                await self.repo.delete(session, metadata)
                deleted += 1
                expired_files_deleted_total.inc()
                logger.info(f"Deleted expired file: {metadata.stored_filename} ({metadata.filename})")

        logger.info(f"Completed cleanup of expired files: {deleted} deleted")
        return deleted
