from datetime import datetime
from typing import List, Optional

from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship

from app.models.base import BaseModel
from app.models.role import Role, UserRole
from app.utils.security import get_password_hash, verify_password as _verify

AUTH_PROVIDER_LOCAL = "LOCAL"
AUTH_PROVIDER_GOOGLE = "GOOGLE"


class User(BaseModel, table=True):
    """
    사용자 정보를 저장하는 테이블
    - LOCAL 계정은 bcrypt 해시 비밀번호, GOOGLE 계정은 google_id로 식별
    - active=False 이면 비활성(soft delete) 계정
    """

    __tablename__ = "users"  # ✅ SQL 예약어 충돌 방지

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        sa_column_kwargs={"autoincrement": True},
    )

    username: str = Field(
        max_length=50,
        nullable=False,
        sa_column_kwargs={"unique": True},
    )

    google_id: Optional[str] = Field(
        default=None,
        max_length=255,
        sa_column_kwargs={"unique": True},
    )

    email: Optional[str] = Field(
        default=None,
        max_length=255,
        sa_column_kwargs={"unique": True},
    )

    email_verified: bool = Field(default=False, nullable=False)

    email_verification_token: Optional[str] = Field(default=None, max_length=64, index=True)

    token_expiry_date: Optional[datetime] = Field(
        default=None,
        sa_type=TIMESTAMP(timezone=True),
    )

    profile_picture_url: Optional[str] = Field(default=None, max_length=512)

    auth_provider: str = Field(
        default=AUTH_PROVIDER_LOCAL,
        max_length=20,
        nullable=False,
    )

    password: Optional[str] = Field(
        default=None,
        max_length=255,
        description="bcrypt로 해시된 비밀번호 (GOOGLE 계정은 없음)",
    )

    active: bool = Field(default=True, nullable=False)

    roles: List[Role] = Relationship(
        link_model=UserRole,
        sa_relationship_kwargs={"lazy": "selectin"},
    )

    # -------------------- #
    # 비밀번호 관련 유틸리티
    # -------------------- #

    @classmethod
    def hash_password(cls, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, password: str) -> bool:
        """
        GOOGLE 계정처럼 비밀번호가 없으면 항상 False
        """
        if not self.password:
            return False
        return _verify(password, self.password)

    # -------------------- #
    # 헬퍼 메서드
    # -------------------- #

    @property
    def role_names(self) -> List[str]:
        return sorted(role.name for role in self.roles)

    @property
    def is_local(self) -> bool:
        return (self.auth_provider or "").upper() == AUTH_PROVIDER_LOCAL

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"
