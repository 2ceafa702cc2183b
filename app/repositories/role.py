import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.role import Role

logger = logging.getLogger(__name__)


class RoleRepository:
    """
    권한(Role) 데이터베이스 접근
    """

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Role]:
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalars().first()

    async def get_all(self, db: AsyncSession) -> List[Role]:
        result = await db.execute(select(Role).order_by(Role.id))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, name: str) -> Role:
        try:
            role = Role(name=name)
            db.add(role)
            await db.commit()
            await db.refresh(role)
            logger.info(f"Role 생성 완료: {name}")
            return role
        except Exception as e:
            await db.rollback()
            logger.error(f"Role 생성 오류 (name={name}): {e}")
            raise
