import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    사용자 데이터베이스 접근을 담당하는 Repository 클래스
    조회 메서드는 없으면 None, 쓰기 메서드는 실패 시 rollback 후 예외를 다시 던짐
    """

    async def save(self, db: AsyncSession, user: User) -> User:
        """
        신규/변경된 사용자를 저장합니다.
        """
        try:
            db.add(user)
            await db.commit()
            await db.refresh(user)
            logger.info(f"사용자 저장 완료: {user.username}")
            return user

        except IntegrityError as ie:
            await db.rollback()
            logger.error(f"사용자 저장 무결성 오류 (username={user.username}): {ie}")
            raise
        except Exception as e:
            await db.rollback()
            logger.error(f"사용자 저장 오류 (username={user.username}): {e}")
            raise

    async def get_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalars().first()
        if not user:
            logger.debug(f"사용자를 찾을 수 없음: {username}")
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_google_id(self, db: AsyncSession, google_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.google_id == google_id))
        return result.scalars().first()

    async def get_by_email_verification_token(self, db: AsyncSession, token: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email_verification_token == token))
        return result.scalars().first()

    async def exists_by_username(self, db: AsyncSession, username: str) -> bool:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.username == username)
        )
        return result.scalar() > 0

    async def exists_by_email(self, db: AsyncSession, email: str) -> bool:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.email == email)
        )
        return result.scalar() > 0
