import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.file_metadata import FileMetadata

logger = logging.getLogger(__name__)


class FileMetadataRepository:
    """
    파일 메타데이터 데이터베이스 접근
    """

    async def save(self, db: AsyncSession, metadata: FileMetadata) -> FileMetadata:
        try:
            db.add(metadata)
            await db.commit()
            await db.refresh(metadata)
            return metadata
        except Exception as e:
            await db.rollback()
            logger.error(f"파일 메타데이터 저장 오류 (uuid={metadata.uuid}): {e}")
            raise

    async def delete(self, db: AsyncSession, metadata: FileMetadata) -> None:
        try:
            await db.delete(metadata)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"파일 메타데이터 삭제 오류 (uuid={metadata.uuid}): {e}")
            raise

    async def increment_download_count(self, db: AsyncSession, uuid: str, max_downloads: int) -> bool:
        """
        download_count < max_downloads 일 때만 1 증가 (조건부 UPDATE)
        증가했으면 True, 이미 한도에 도달했으면 False
        """
        try:
            result = await db.execute(
                update(FileMetadata)
                .where(
                    FileMetadata.uuid == uuid,
                    FileMetadata.download_count < max_downloads,
                )
                .values(download_count=FileMetadata.download_count + 1)
            )
            await db.commit()
            return result.rowcount > 0
        except Exception as e:
            await db.rollback()
            logger.error(f"다운로드 횟수 증가 오류 (uuid={uuid}): {e}")
            raise

    async def get_by_uuid(self, db: AsyncSession, uuid: str) -> Optional[FileMetadata]:
        """owner는 selectin으로 함께 로드됨"""
        result = await db.execute(select(FileMetadata).where(FileMetadata.uuid == uuid))
        return result.scalars().first()

    async def exists_by_uuid(self, db: AsyncSession, uuid: str) -> bool:
        result = await db.execute(
            select(func.count()).select_from(FileMetadata).where(FileMetadata.uuid == uuid)
        )
        return result.scalar() > 0

    async def get_by_uuid_and_owner(self, db: AsyncSession, uuid: str,
                                    user_id: int) -> Optional[FileMetadata]:
        result = await db.execute(
            select(FileMetadata).where(
                FileMetadata.uuid == uuid,
                FileMetadata.user_id == user_id,
            )
        )
        return result.scalars().first()

    async def get_by_owner(self, db: AsyncSession, user_id: int) -> List[FileMetadata]:
        """업로드 최신순"""
        result = await db.execute(
            select(FileMetadata)
            .where(FileMetadata.user_id == user_id)
            .order_by(FileMetadata.upload_date.desc())
        )
        return list(result.scalars().all())

    async def get_expired_before(self, db: AsyncSession, moment: datetime) -> List[FileMetadata]:
        result = await db.execute(
            select(FileMetadata).where(FileMetadata.expiry_date < moment)
        )
        return list(result.scalars().all())

    async def get_owner_totals(self, db: AsyncSession, user_id: int) -> Tuple[int, int, int]:
        """
        (파일 수, 전체 용량, 전체 다운로드 수)
        """
        result = await db.execute(
            select(
                func.count(FileMetadata.uuid),
                func.coalesce(func.sum(FileMetadata.size), 0),
                func.coalesce(func.sum(FileMetadata.download_count), 0),
            ).where(FileMetadata.user_id == user_id)
        )
        count, total_size, total_downloads = result.one()
        return int(count), int(total_size), int(total_downloads)
