import asyncio
import os
import tempfile
from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="proximashare-tests-"))

# 설정은 import 시점에 로드되므로 app import 전에 환경 변수를 지정
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_ROOT / 'proximashare-tests.sqlite3'}"
os.environ["STORAGE_PATH"] = str(_TMP_ROOT / "storage")
os.environ["PROFILE_PICTURES_DIR"] = str(_TMP_ROOT / "uploads" / "profile-pictures")
os.environ["JWT_SECRET"] = "tests-secret-key"
os.environ["DEPLOY_PHASE"] = "local"
os.environ["CLEANUP_ENABLED"] = "false"
os.environ["ERROR_INCLUDE_STACKTRACE"] = "false"
os.environ["PRODUCTION"] = "false"
os.environ["MAIL_HOST"] = ""
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.database import async_session, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.file_metadata import FileMetadata  # noqa: E402
from app.models.role import ROLE_USER  # noqa: E402
from app.models.user import AUTH_PROVIDER_LOCAL, User  # noqa: E402
from app.repositories.role import RoleRepository  # noqa: E402
from app.utils.datetime import utc_now  # noqa: E402
from app.utils.dependencies import get_email_service  # noqa: E402
from app.utils.security import create_access_token  # noqa: E402
from app.utils.seed_data import init_seed_data  # noqa: E402

PASSWORD = "password123"


class FakeEmailService:
    """발송 대신 (to, username, token)을 기록"""

    def __init__(self):
        self.sent: List[tuple] = []

    async def send_verification_email(self, to_email: str, username: str, token: str) -> None:
        self.sent.append((to_email, username, token))


async def reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    async with async_session() as session:
        await init_seed_data(session)


async def _create_user(username: str, password: Optional[str], email: Optional[str],
                       roles: Iterable[str], active: bool, auth_provider: str,
                       email_verified: bool) -> User:
    async with async_session() as session:
        role_repo = RoleRepository()
        role_objs = [await role_repo.get_by_name(session, name) for name in roles]
        user = User(
            username=username,
            email=email,
            password=User.hash_password(password) if password else None,
            auth_provider=auth_provider,
            active=active,
            email_verified=email_verified,
            roles=role_objs,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


def create_user(username: str = "testuser", password: Optional[str] = PASSWORD,
                email: Optional[str] = None, roles: Iterable[str] = (ROLE_USER,),
                active: bool = True, auth_provider: str = AUTH_PROVIDER_LOCAL,
                email_verified: bool = False) -> User:
    """동기 테스트용 사용자 생성 헬퍼"""
    return asyncio.run(_create_user(
        username, password, email or f"{username}@example.com", tuple(roles),
        active, auth_provider, email_verified,
    ))


def auth_headers(user: User) -> dict:
    token = create_access_token(user.username, user.role_names)
    return {"Authorization": f"Bearer {token}"}


async def _get_file(file_uuid: str) -> Optional[FileMetadata]:
    async with async_session() as session:
        return await session.get(FileMetadata, file_uuid)


def get_file(file_uuid: str) -> Optional[FileMetadata]:
    return asyncio.run(_get_file(file_uuid))


async def _get_user(username: str) -> Optional[User]:
    from app.repositories.user import UserRepository

    async with async_session() as session:
        return await UserRepository().get_by_username(session, username)


def get_user(username: str) -> Optional[User]:
    return asyncio.run(_get_user(username))


async def _expire_file(file_uuid: str, days_ago: int) -> None:
    async with async_session() as session:
        metadata = await session.get(FileMetadata, file_uuid)
        metadata.expiry_date = utc_now() - timedelta(days=days_ago)
        session.add(metadata)
        await session.commit()


def expire_file(file_uuid: str, days_ago: int = 1) -> None:
    asyncio.run(_expire_file(file_uuid, days_ago))


@pytest.fixture
def storage_dirs(tmp_path, monkeypatch):
    storage = tmp_path / "storage"
    pictures = tmp_path / "profile-pictures"
    monkeypatch.setattr(settings, "STORAGE_PATH", storage)
    monkeypatch.setattr(settings, "PROFILE_PICTURES_DIR", pictures)
    return storage, pictures


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def client(storage_dirs, email_service):
    asyncio.run(reset_database())
    app.dependency_overrides[get_email_service] = lambda: email_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def session(storage_dirs):
    await reset_database()
    async with async_session() as db:
        yield db
