"""
API 스키마 모듈

Request/Response 스키마들을 정의합니다.
API 데이터 형식(camelCase JSON)을 정의합니다.
"""

from .auth import (GoogleLoginData, GoogleLoginRequest, LoginData,
                   LoginRequest, RegistrationRequest, UserData)
from .common import ApiResponse, ErrorDetails, MessageResponse
from .file import FileMetadataResponse, RoleResponse, UploadResponse
from .user import (ChangePasswordRequest, EmailVerificationRequest,
                   UserProfileResponse, UserStats)

__all__ = [
    "ApiResponse",
    "ErrorDetails",
    "MessageResponse",
    "RegistrationRequest",
    "LoginRequest",
    "GoogleLoginRequest",
    "UserData",
    "LoginData",
    "GoogleLoginData",
    "UserProfileResponse",
    "ChangePasswordRequest",
    "EmailVerificationRequest",
    "UserStats",
    "FileMetadataResponse",
    "UploadResponse",
    "RoleResponse",
]
