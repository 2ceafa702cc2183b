import re
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, require_text

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9+_.-]+@(.+)")


class RegistrationRequest(CamelModel):
    """
    회원가입 요청 스키마
    """
    username: Optional[str] = Field(None, validate_default=True, description="사용자명 (4-50자)")
    email: Optional[str] = Field(None, validate_default=True, description="이메일 주소")
    password: Optional[str] = Field(None, validate_default=True, description="비밀번호 (최소 8자)")
    roles: Optional[List[str]] = Field(None, validate_default=True, description="요청 권한 목록")

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: Optional[str]) -> str:
        value = require_text(value, "Username is required")
        if not 4 <= len(value) <= 50:
            raise ValueError("Username must be between 4 and 50 characters")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> str:
        value = require_text(value, "Email is required")
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: Optional[str]) -> str:
        value = require_text(value, "Password is required")
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return value

    @field_validator("roles")
    @classmethod
    def _check_roles(cls, value: Optional[List[str]]) -> List[str]:
        if not value:
            raise ValueError("At least one role is required")
        return value

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "newuser",
                "email": "newuser@example.com",
                "password": "password123",
                "roles": ["ROLE_USER"],
            }
        }
    }


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class GoogleLoginRequest(CamelModel):
    id_token: Optional[str] = Field(None, validate_default=True, description="Google ID token")

    @field_validator("id_token")
    @classmethod
    def _check_id_token(cls, value: Optional[str]) -> str:
        return require_text(value, "ID token is required")


class UserData(CamelModel):
    """
    회원가입 응답 데이터 (profilePicture는 있을 때만 포함)
    """
    id: int
    username: str
    email: Optional[str] = None
    roles: List[str]
    profile_picture: Optional[str] = Field(None, alias="profilePicture")

    @classmethod
    def from_user(cls, user) -> "UserData":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=user.role_names,
            profile_picture=user.profile_picture_url,
        )


class LoginData(CamelModel):
    id: int
    username: str
    roles: List[str]
    token: str


class GoogleLoginData(LoginData):
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None
    auth_provider: str
