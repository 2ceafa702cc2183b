import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from app.core.config import settings
from app.models import FileMetadata, Role, User, UserRole  # noqa: F401 (테이블 등록)

logger = logging.getLogger(__name__)


def build_engine(url: str) -> AsyncEngine:
    """
    DATABASE_URL로 비동기 엔진 생성
    SQLite(테스트용)는 이벤트 루프마다 새 연결을 쓰도록 풀을 사용하지 않음
    """
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.DATABASE_ECHO, poolclass=NullPool)
    return create_async_engine(url, echo=settings.DATABASE_ECHO, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)

async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@asynccontextmanager
async def get_async_session_context():
    """비동기 DB 세션 컨텍스트 매니저 (백그라운드 작업용)"""
    async with async_session() as session:
        yield session


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """비동기 DB 세션 생성 - FastAPI Dependency Injection용"""
    async with async_session() as session:
        yield session


async def init_db(bind: AsyncEngine = engine):
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성 완료")


async def ping_db() -> bool:
    """헬스 체크용 SELECT 1"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False
