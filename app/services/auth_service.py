# services/auth_service.py
import logging
from typing import Any, Dict, Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import BadRequestError, UnauthorizedError
from app.models.role import ROLE_ADMIN, ROLE_USER
from app.models.user import AUTH_PROVIDER_GOOGLE, AUTH_PROVIDER_LOCAL, User
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.schemas.auth import RegistrationRequest
from app.utils.security import create_access_token

logger = logging.getLogger(__name__)


class GoogleTokenVerifier:
    """
    Google ID 토큰 검증 (google-auth)
    """

    def __init__(self, client_id: Optional[str] = None):
        self.client_id = client_id if client_id is not None else settings.GOOGLE_CLIENT_ID

    async def verify(self, token: str) -> Dict[str, Any]:
        try:
            return await run_in_threadpool(
                google_id_token.verify_oauth2_token,
                token,
                google_requests.Request(),
                self.client_id,
            )
        except Exception as e:
            logger.warning(f"Google ID token verification failed: {e}")
            raise UnauthorizedError(f"Failed to verify Google ID token: {e}") from e


class AuthService:
    """
    회원가입 / 로그인 / Google 로그인 및 JWT 발급
    """

    def __init__(self, db: AsyncSession, google_verifier: Optional[GoogleTokenVerifier] = None):
        self.db = db
        self.user_repo = UserRepository()
        self.role_repo = RoleRepository()
        self.google_verifier = google_verifier or GoogleTokenVerifier()

    async def register(self, request: RegistrationRequest) -> User:
        if await self.user_repo.exists_by_username(self.db, request.username):
            raise BadRequestError("Username is already taken")

        if await self.user_repo.exists_by_email(self.db, request.email):
            raise BadRequestError("Email is already registered, Please login or forgot password.")

        roles = []
        for role_name in request.roles:
            if role_name.upper() == ROLE_ADMIN:
                raise BadRequestError("Admin role cannot be assigned during registration.")

            role = await self.role_repo.get_by_name(self.db, role_name)
            if role is None:
                raise BadRequestError(f"Role not found: {role_name}")
            if role not in roles:
                roles.append(role)

        user = User(
            username=request.username,
            email=request.email,
            password=User.hash_password(request.password),
            auth_provider=AUTH_PROVIDER_LOCAL,
            email_verified=False,
            active=False,
            roles=roles,
        )
        user = await self.user_repo.save(self.db, user)
        logger.info(f"User registered: {user.username}")
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> tuple[User, str]:
        """
        로그인 처리 및 JWT 토큰 발급
        """
        user = await self.user_repo.get_by_username(self.db, username) if username else None
        if not user:
            logger.warning(f"Login failed: user not found ({username})")
            raise BadRequestError("Invalid username")

        if not password or not user.verify_password(password):
            logger.warning(f"Login failed: invalid password ({username})")
            raise BadRequestError("Invalid password")

        token = create_access_token(user.username, user.role_names)
        logger.info(f"User login success: {user.username}")
        return user, token

    async def login_with_google(self, id_token: str) -> tuple[User, str]:
        """
        Google 로그인 (최초 로그인 시 계정 자동 생성)
        """
        payload = await self.google_verifier.verify(id_token)

        google_id = payload.get("sub")
        email = payload.get("email")
        picture = payload.get("picture")

        user = await self.user_repo.get_by_google_id(self.db, google_id)
        if user is None:
            if email and await self.user_repo.get_by_email(self.db, email):
                raise BadRequestError(
                    "Email is already registered with a local account. Please use password login."
                )
            user = await self._create_google_user(google_id, email, picture)

        token = create_access_token(user.username, user.role_names)
        logger.info(f"Google login success: {user.username}")
        return user, token

    async def _create_google_user(self, google_id: str, email: Optional[str],
                                  picture: Optional[str]) -> User:
        role = await self.role_repo.get_by_name(self.db, ROLE_USER)
        if role is None:
            raise RuntimeError(f"Role not found: {ROLE_USER}")

        user = User(
            google_id=google_id,
            email=email,
            username=await self.generate_username_from_email(email or google_id),
            profile_picture_url=picture,
            password=None,
            auth_provider=AUTH_PROVIDER_GOOGLE,
            email_verified=True,  # Google 이메일은 검증된 것으로 간주
            active=True,
            roles=[role],
        )
        return await self.user_repo.save(self.db, user)

    async def generate_username_from_email(self, email: str) -> str:
        """
        이메일 로컬 파트 기반 username, 중복이면 1, 2, ... 접미사
        """
        base_username = email.split("@")[0]
        username = base_username
        counter = 1
        while await self.user_repo.exists_by_username(self.db, username):
            username = f"{base_username}{counter}"
            counter += 1
        return username
