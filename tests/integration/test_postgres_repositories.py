"""PostgreSQL(testcontainers) 기반 통합 테스트

Docker를 사용할 수 없으면 전체 모듈을 skip 합니다.
    pytest -m integration
"""
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from app.database import build_engine
from app.models.file_metadata import FileMetadata
from app.models.user import User
from app.repositories.file_metadata import FileMetadataRepository
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.services.file_cleanup_scheduler import FileCleanupScheduler
from app.utils.datetime import utc_now
from app.utils.seed_data import init_seed_data

pytestmark = pytest.mark.integration


def _docker_available() -> bool:
    try:
        import docker

        docker.from_env().ping()
        return True
    except Exception:
        return False


@pytest.fixture(scope="module")
def postgres_url():
    if not _docker_available():
        pytest.skip("Docker is not available")

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer("postgres:16-alpine", driver="asyncpg") as postgres:
        yield postgres.get_connection_url()


@pytest.fixture
async def pg_session(postgres_url):
    engine = build_engine(postgres_url)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await init_seed_data(session)
        yield session

    await engine.dispose()


async def test_seed_is_idempotent(pg_session):
    await init_seed_data(pg_session)

    roles = await RoleRepository().get_all(pg_session)
    assert [role.name for role in roles] == ["ROLE_ADMIN", "ROLE_USER"]
    assert (await UserRepository().get_by_username(pg_session, "admin")).role_names == ["ROLE_ADMIN"]


async def test_timezone_aware_timestamps_roundtrip(pg_session):
    repo = FileMetadataRepository()
    expiry = utc_now() + timedelta(days=7)
    await repo.save(pg_session, FileMetadata(uuid="tz-check", filename="a.txt", size=1, expiry_date=expiry))

    pg_session.expunge_all()
    stored = await repo.get_by_uuid(pg_session, "tz-check")

    assert stored.expiry_date.tzinfo is not None
    assert stored.expiry_date == expiry


async def test_owner_totals_and_cleanup(pg_session, tmp_path):
    role = await RoleRepository().get_by_name(pg_session, "ROLE_USER")
    owner = await UserRepository().save(
        pg_session, User(username="pguser", email="pguser@example.com", roles=[role])
    )
    repo = FileMetadataRepository()
    now = utc_now()
    await repo.save(pg_session, FileMetadata(uuid="live", filename="live.txt", size=5, download_count=1,
                                             expiry_date=now + timedelta(days=1), user_id=owner.id,
                                             is_public=False))
    await repo.save(pg_session, FileMetadata(uuid="dead", filename="dead.txt", size=7, download_count=4,
                                             expiry_date=now - timedelta(days=1), user_id=owner.id,
                                             is_public=False))
    (tmp_path / "dead.txt").write_bytes(b"x")

    assert await repo.get_owner_totals(pg_session, owner.id) == (2, 12, 5)

    class _Factory:
        async def __aenter__(self):
            return pg_session

        async def __aexit__(self, *exc):
            return False

    scheduler = FileCleanupScheduler(session_factory=_Factory, storage_path=tmp_path)
    assert await scheduler.cleanup_expired_files() == 1
    assert not (tmp_path / "dead.txt").exists()
    assert await repo.get_owner_totals(pg_session, owner.id) == (1, 5, 1)
