# utils/dependencies.py
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.database import get_session
from app.models.role import ROLE_ADMIN, ROLE_USER
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.auth_service import AuthService
from app.services.email_service import EmailService
from app.services.file_service import FileService
from app.services.user_service import UserService
from app.utils.security import decode_token

# Swagger에서 Authorize → 토큰만 입력해도 Bearer 자동으로 붙음
# auto_error=False: 토큰 누락도 401(ErrorDetails)로 통일
auth_scheme = HTTPBearer(auto_error=False)


def get_email_service() -> EmailService:
    return EmailService()


async def get_auth_service(db: AsyncSession = Depends(get_session)) -> AuthService:
    """
    AuthService 의존성 주입용 팩토리 함수.
    """
    return AuthService(db)


async def get_file_service(db: AsyncSession = Depends(get_session)) -> FileService:
    return FileService(db)


async def get_user_service(
    db: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
) -> UserService:
    """
    사용자 서비스 의존성 주입 (FastAPI Depends용)
    """
    return UserService(db, email_service=email_service)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    JWT Access Token을 해독하고 현재 로그인한 사용자 반환
    """
    if credentials is None:
        raise UnauthorizedError("Full authentication is required to access this resource")

    token = credentials.credentials  # <-- "Bearer xxx"에서 xxx 추출
    payload = decode_token(token)

    if not payload:
        raise UnauthorizedError("Invalid or expired token")

    sub = payload.get("sub")
    # ★ 타입 내로잉: str 타입인지 검증해서 None/Unknown 제거
    if not isinstance(sub, str) or not sub:
        raise UnauthorizedError("Invalid token payload (sub)")

    repo = UserRepository()
    user = await repo.get_by_username(db, sub)

    if not user:
        raise UnauthorizedError("User not found")

    return user


def require_roles(*allowed_roles: str):
    """
    주어진 역할 중 하나라도 가진 사용자만 허용 (없으면 403)
    """

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if not set(user.role_names) & set(allowed_roles):
            raise ForbiddenError("Access Denied")
        return user

    return role_checker


# /user/** 공통: ROLE_USER 또는 ROLE_ADMIN
require_user = require_roles(ROLE_USER, ROLE_ADMIN)

CurrentUser = Annotated[User, Depends(require_user)]
