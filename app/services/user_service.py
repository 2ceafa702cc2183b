import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.user import User
from app.repositories.file_metadata import FileMetadataRepository
from app.repositories.user import UserRepository
from app.schemas.user import ChangePasswordRequest, UserProfileResponse, UserStats
from app.services.email_service import EmailService
from app.utils.datetime import add_hours, is_past, utc_now
from app.utils.storage import client_filename, remove_file, save_upload, upload_size

logger = logging.getLogger(__name__)

PROFILE_PICTURE_URL_PREFIX = "/uploads/profile-pictures/"


class UserService:
    """
    사용자 계정 관련 비즈니스 로직을 담당하는 Service 클래스
    (프로필, 프로필 사진, 비밀번호 변경, 비활성화, 이메일 인증, 통계)
    """

    def __init__(self, db: AsyncSession, email_service: Optional[EmailService] = None,
                 profile_pictures_dir: Optional[Path] = None):
        self.db = db
        self.user_repo = UserRepository()
        self.file_repo = FileMetadataRepository()
        self.email_service = email_service or EmailService()
        self.profile_pictures_dir = Path(profile_pictures_dir or settings.PROFILE_PICTURES_DIR)

    # -------------------- #
    # 프로필
    # -------------------- #

    async def get_user_profile(self, username: str) -> UserProfileResponse:
        user = await self._get_active_user(username)
        return UserProfileResponse.from_user(user)

    async def upload_profile_picture(self, username: str, file: UploadFile) -> UserProfileResponse:
        """
        프로필 사진 업로드
        - 파일명: <userId>_<uuid><확장자 또는 .jpg>
        - 기존 사진은 삭제 후 교체
        """
        user = await self._get_active_user(username)

        size = upload_size(file)
        if size == 0:
            raise BadRequestError("File is empty")
        if size > settings.PROFILE_PICTURE_MAX_SIZE:
            raise BadRequestError("File size exceeds maximum limit of 5MB")

        content_type = file.content_type or ""
        if not content_type.startswith("image/"):
            raise BadRequestError("Only image files are allowed")

        original = client_filename(file)
        extension = original[original.rindex("."):] if "." in original else ".jpg"
        filename = f"{user.id}_{uuid.uuid4()}{extension}"
        target = self.profile_pictures_dir / filename

        await save_upload(file, target)

        self._remove_picture_file(user.profile_picture_url)

        user.profile_picture_url = PROFILE_PICTURE_URL_PREFIX + filename
        user = await self.user_repo.save(self.db, user)
        logger.info(f"프로필 사진 업로드 완료: {user.username} -> {filename}")
        return UserProfileResponse.from_user(user)

    async def delete_profile_picture(self, username: str) -> UserProfileResponse:
        user = await self._get_active_user(username)

        if user.profile_picture_url:
            self._remove_picture_file(user.profile_picture_url)
            user.profile_picture_url = None
            user = await self.user_repo.save(self.db, user)
            logger.info(f"프로필 사진 삭제 완료: {user.username}")

        return UserProfileResponse.from_user(user)

    # -------------------- #
    # 계정
    # -------------------- #

    async def change_password(self, username: str, request: ChangePasswordRequest) -> None:
        user = await self._get_active_user(username)

        if not user.verify_password(request.old_password):
            raise BadRequestError("Old password is incorrect")

        if user.verify_password(request.new_password):
            raise BadRequestError("New and Old passwords cannot be same")

        if request.new_password != request.confirm_new_password:
            raise BadRequestError("New password and confirmation do not match")

        user.password = User.hash_password(request.new_password)
        await self.user_repo.save(self.db, user)
        logger.info(f"비밀번호 변경 완료: {user.username}")

    async def deactivate_account(self, username: str) -> None:
        user = await self._get_user(username)

        if not user.active:
            raise BadRequestError("Account is already deactivated")

        user.active = False
        await self.user_repo.save(self.db, user)
        logger.info(f"계정 비활성화: {user.username}")

    # -------------------- #
    # 이메일 인증
    # -------------------- #

    async def resend_verification_email(self, username: str) -> None:
        """
        인증 토큰(UUID, 유효기간 EMAIL_TOKEN_EXPIRY_HOURS)을 새로 발급하고 메일 발송
        """
        user = await self._get_user(username)
        self._check_verifiable(user)

        previous = (user.email_verification_token, user.token_expiry_date)
        token = await self.generate_email_verification_token(user)
        try:
            await self.email_service.send_verification_email(user.email, user.username, token)
        except Exception:
            # 발송 실패 시 기존 토큰 유지
            user.email_verification_token, user.token_expiry_date = previous
            await self.user_repo.save(self.db, user)
            raise

    async def generate_email_verification_token(self, user: User) -> str:
        token = str(uuid.uuid4())
        user.email_verification_token = token
        user.token_expiry_date = add_hours(utc_now(), settings.EMAIL_TOKEN_EXPIRY_HOURS)
        await self.user_repo.save(self.db, user)
        return token

    async def verify_email(self, token: str) -> None:
        user = await self.user_repo.get_by_email_verification_token(self.db, token)
        if not user:
            raise BadRequestError("Invalid verification token")

        self._check_verifiable(user)

        if user.token_expiry_date is None or is_past(user.token_expiry_date):
            raise BadRequestError("Verification token has expired. Please request a new one.")

        user.email_verified = True
        user.active = True
        user.email_verification_token = None
        user.token_expiry_date = None
        await self.user_repo.save(self.db, user)
        logger.info(f"이메일 인증 완료: {user.username}")

    # -------------------- #
    # 통계
    # -------------------- #

    async def get_user_stats(self, username: str) -> UserStats:
        user = await self._get_active_user(username)
        count, total_size, total_downloads = await self.file_repo.get_owner_totals(self.db, user.id)
        return UserStats(
            total_files_uploaded=count,
            total_storage_used=total_size,
            total_downloads=total_downloads,
        )

    # -------------------- #
    # 내부 헬퍼
    # -------------------- #

    async def _get_user(self, username: str) -> User:
        user = await self.user_repo.get_by_username(self.db, username)
        if not user:
            raise NotFoundError(f"User not found: {username}")
        return user

    async def _get_active_user(self, username: str) -> User:
        user = await self._get_user(username)
        if not user.active:
            raise BadRequestError("Account is deactivated")
        return user

    @staticmethod
    def _check_verifiable(user: User) -> None:
        if not user.is_local:
            raise BadRequestError("Email verification is only for LOCAL accounts")
        if user.email_verified:
            raise BadRequestError("Email is already verified")

    def _remove_picture_file(self, url: Optional[str]) -> None:
        """
        외부 URL(Google 프로필 등)은 무시, 삭제 실패는 로그만 남김
        """
        if not url or not url.startswith(PROFILE_PICTURE_URL_PREFIX):
            return

        path = self.profile_pictures_dir / url[len(PROFILE_PICTURE_URL_PREFIX):]
        remove_file(path)
