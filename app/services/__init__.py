"""
서비스 계층 모듈

비즈니스 로직을 담당합니다.
Repository와 Controller 사이의 중간 계층입니다.
"""

from .auth_service import AuthService, GoogleTokenVerifier
from .email_service import EmailService
from .file_cleanup_scheduler import FileCleanupScheduler
from .file_service import FileService
from .user_service import UserService

__all__ = [
    "AuthService",
    "GoogleTokenVerifier",
    "EmailService",
    "FileCleanupScheduler",
    "FileService",
    "UserService",
]
