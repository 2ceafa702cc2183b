# app/utils/seed_data.py
"""
초기 데이터 시딩 유틸리티
- 앱 시작 시 자동으로 실행되어 기본 Role(ROLE_ADMIN, ROLE_USER)과 관리자 계정을 보장함
- 이미 존재하면 아무것도 하지 않음 (여러 번 실행해도 안전)
"""
import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.role import DEFAULT_ROLES, ROLE_ADMIN, Role
from app.models.user import AUTH_PROVIDER_LOCAL, User
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository

logger = logging.getLogger(__name__)


async def seed_roles(db: AsyncSession) -> Dict[str, Role]:
    """기본 Role이 없으면 생성하고 {name: Role} 반환"""
    repo = RoleRepository()
    roles: Dict[str, Role] = {}

    for name in DEFAULT_ROLES:
        role = await repo.get_by_name(db, name)
        if role is None:
            role = await repo.create(db, name)
        roles[name] = role

    return roles


async def get_or_create_admin_user(db: AsyncSession, admin_role: Role) -> User:
    """설정된 관리자(ADMIN_USERNAME) 계정을 가져오거나 생성합니다."""
    repo = UserRepository()

    user = await repo.get_by_username(db, settings.ADMIN_USERNAME)
    if user:
        return user

    admin = User(
        username=settings.ADMIN_USERNAME,
        password=User.hash_password(settings.ADMIN_PASSWORD),
        auth_provider=AUTH_PROVIDER_LOCAL,
        active=True,
        roles=[admin_role],
    )
    admin = await repo.save(db, admin)
    logger.info(f"관리자 계정 생성: {admin.username}")
    return admin


async def init_seed_data(db: AsyncSession) -> None:
    """앱 시작 시 실행되는 초기 데이터 시딩"""
    try:
        roles = await seed_roles(db)
        await get_or_create_admin_user(db, roles[ROLE_ADMIN])
        logger.info("초기 데이터 시딩 완료")
    except Exception as e:
        logger.error(f"초기 데이터 시딩 중 오류: {e}")
        raise
