from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, require_text


class UserProfileResponse(CamelModel):
    """
    내 프로필 응답 스키마
    """
    id: int
    username: str
    email: Optional[str] = None
    email_verified: bool
    profile_picture_url: Optional[str] = None
    auth_provider: str
    roles: List[str]

    @classmethod
    def from_user(cls, user) -> "UserProfileResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            email_verified=bool(user.email_verified),
            profile_picture_url=user.profile_picture_url,
            auth_provider=user.auth_provider,
            roles=user.role_names,
        )


class ChangePasswordRequest(CamelModel):
    old_password: Optional[str] = Field(None, validate_default=True)
    new_password: Optional[str] = Field(None, validate_default=True)
    confirm_new_password: Optional[str] = Field(None, validate_default=True)

    @field_validator("old_password")
    @classmethod
    def _check_old(cls, value: Optional[str]) -> str:
        return require_text(value, "Old password is required")

    @field_validator("new_password")
    @classmethod
    def _check_new(cls, value: Optional[str]) -> str:
        value = require_text(value, "New password is required")
        if len(value) < 8:
            raise ValueError("New password must be at least 8 characters long")
        return value

    @field_validator("confirm_new_password")
    @classmethod
    def _check_confirm(cls, value: Optional[str]) -> str:
        return require_text(value, "Confirm new password is required")


class EmailVerificationRequest(CamelModel):
    token: Optional[str] = Field(None, validate_default=True)

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: Optional[str]) -> str:
        return require_text(value, "Verification token is required")


class UserStats(CamelModel):
    total_files_uploaded: int = Field(0, description="업로드한 파일 수")
    total_storage_used: int = Field(0, description="사용 용량 (bytes)")
    total_downloads: int = Field(0, description="전체 다운로드 수")
