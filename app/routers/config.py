# routers/config.py
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.repositories.role import RoleRepository
from app.schemas.file import RoleResponse

router = APIRouter(prefix="/api/public/config", tags=["config"])


@router.get(
    "/roles",
    response_model=List[RoleResponse],
    summary="Role 목록",
    description="회원가입 화면에서 사용할 전체 Role 목록 (인증 불필요)",
)
async def get_roles(db: Annotated[AsyncSession, Depends(get_session)]):
    roles = await RoleRepository().get_all(db)
    return [RoleResponse.model_validate(role) for role in roles]
