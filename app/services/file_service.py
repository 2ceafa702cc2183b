"""
파일 업로드 / 조회 / 다운로드 / 삭제 서비스

실제 파일은 STORAGE_PATH/<uuid><확장자> 로 저장하고,
메타데이터(만료일, 다운로드 횟수, 소유자)는 file_metadata 테이블에 저장합니다.
"""
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import GIB, settings
from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.core.metrics import files_downloaded_total, files_uploaded_total
from app.models.file_metadata import FileMetadata
from app.models.user import User
from app.repositories.file_metadata import FileMetadataRepository
from app.utils.datetime import add_days, is_past, utc_now
from app.utils.storage import client_filename, remove_file, save_upload, upload_size

logger = logging.getLogger(__name__)

MIB = 1_048_576


def format_size_limit(limit: int) -> str:
    """1073741824 -> '1GB', 5242880 -> '5MB'"""
    if limit >= GIB and limit % GIB == 0:
        return f"{limit // GIB}GB"
    if limit >= MIB and limit % MIB == 0:
        return f"{limit // MIB}MB"
    return f"{limit} bytes"


class FileService:
    """
    공개(익명) 업로드와 사용자 업로드를 모두 처리
    - 공개 파일: PUBLIC_* 제한 (용량 / 만료일 / 다운로드 횟수)
    - 사용자 파일: USER_* 제한
    """

    def __init__(self, db: AsyncSession, storage_path: Optional[Path] = None):
        self.db = db
        self.repo = FileMetadataRepository()
        self.storage_path = Path(storage_path or settings.STORAGE_PATH)

    # -------------------- #
    # 업로드
    # -------------------- #

    async def upload_file(self, file: UploadFile) -> str:
        """익명 업로드, uuid 반환"""
        metadata = await self._store(
            file,
            owner=None,
            max_size=settings.PUBLIC_MAX_SIZE,
            expiry_days=settings.PUBLIC_EXPIRY_DAYS,
        )
        return metadata.uuid

    async def upload_file_for_user(self, file: UploadFile, user: User) -> str:
        metadata = await self._store(
            file,
            owner=user,
            max_size=settings.USER_MAX_SIZE,
            expiry_days=settings.USER_EXPIRY_DAYS,
        )
        return metadata.uuid

    async def _store(self, file: UploadFile, owner: Optional[User],
                     max_size: int, expiry_days: int) -> FileMetadata:
        size = upload_size(file)
        if size == 0:
            raise BadRequestError("File is missing")
        if size > max_size:
            raise BadRequestError(f"File size exceeds {format_size_limit(max_size)} limit")

        file_uuid = await self.generate_unique_uuid()
        now = utc_now()
        metadata = FileMetadata(
            uuid=file_uuid,
            filename=self._original_filename(file),
            size=size,
            mime_type=file.content_type,
            upload_date=now,
            expiry_date=add_days(now, expiry_days),
            download_count=0,
            user_id=owner.id if owner is not None else None,
            is_public=owner is None,
        )

        target = self.storage_path / metadata.stored_filename
        await save_upload(file, target)

        try:
            metadata = await self.repo.save(self.db, metadata)
        except Exception:
            # 메타데이터 저장 실패 시 고아 파일 정리
            remove_file(target)
            raise

        files_uploaded_total.labels(visibility="public" if metadata.is_public else "user").inc()

        logger.info(
            f"파일 업로드 완료: uuid={metadata.uuid}, filename={metadata.filename}, "
            f"size={metadata.size}, owner={owner.username if owner else '-'}"
        )
        return metadata

    async def generate_unique_uuid(self) -> str:
        while True:
            candidate = str(uuid.uuid4())
            if not await self.repo.exists_by_uuid(self.db, candidate):
                return candidate

    # -------------------- #
    # 조회
    # -------------------- #

    async def get_user_files(self, user: User) -> List[FileMetadata]:
        return await self.repo.get_by_owner(self.db, user.id)

    async def get_file_metadata(self, file_uuid: str) -> FileMetadata:
        """
        없으면 404, 만료되었으면 400
        """
        metadata = await self.repo.get_by_uuid(self.db, file_uuid)
        if not metadata:
            raise NotFoundError("File not found or expired")

        if is_past(metadata.expiry_date):
            raise BadRequestError("File expired")

        return metadata

    # -------------------- #
    # 다운로드
    # -------------------- #

    async def download_file(self, file_uuid: str, user: Optional[User] = None) -> tuple[FileMetadata, Path]:
        """
        다운로드 가능 여부 확인 후 download_count 증가, (메타데이터, 파일 경로) 반환

        user가 주어지면 소유자 또는 공개 파일만 허용합니다.
        권한 확인은 카운트 증가 전에 수행됩니다.
        """
        metadata = await self.get_file_metadata(file_uuid)

        if user is not None and not metadata.is_public and metadata.user_id != user.id:
            logger.warning(f"다운로드 권한 없음: uuid={file_uuid}, user={user.username}")
            raise ForbiddenError("Not authorized to download this file")

        max_downloads = settings.PUBLIC_MAX_DOWNLOADS if metadata.is_public else settings.USER_MAX_DOWNLOADS
        limit_error = ForbiddenError(
            f"File download limit reached for this file. (Max. {max_downloads} Times)"
        )
        if metadata.download_count >= max_downloads:
            raise limit_error

        path = self.storage_path / metadata.stored_filename
        if not path.is_file():
            logger.error(f"저장된 파일 없음: {path}")
            raise NotFoundError("File not found or expired")

        # 동시 다운로드에서도 한도를 넘지 않도록 DB에서 조건부로 증가
        if not await self.repo.increment_download_count(self.db, file_uuid, max_downloads):
            logger.warning(f"다운로드 한도 도달: uuid={file_uuid}")
            raise limit_error

        await self.db.refresh(metadata)
        files_downloaded_total.labels(visibility="public" if metadata.is_public else "user").inc()
        logger.info(f"파일 다운로드: uuid={file_uuid}, count={metadata.download_count}/{max_downloads}")
        return metadata, path

    # -------------------- #
    # 삭제
    # -------------------- #

    async def delete_user_file(self, file_uuid: str, user: User) -> None:
        metadata = await self.repo.get_by_uuid_and_owner(self.db, file_uuid, user.id)
        if not metadata:
            raise NotFoundError("File not found or you don't own this file")

        await self.delete_file(metadata)
        logger.info(f"파일 삭제 완료: uuid={file_uuid}, user={user.username}")

    async def delete_file(self, metadata: FileMetadata) -> None:
        """저장 파일과 메타데이터를 함께 삭제"""
        remove_file(self.storage_path / metadata.stored_filename)
        await self.repo.delete(self.db, metadata)

    # -------------------- #
    # 내부 헬퍼
    # -------------------- #

    @staticmethod
    def _original_filename(file: UploadFile) -> str:
        return client_filename(file) or "unknown"

