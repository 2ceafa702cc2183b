from typing import Optional

from sqlmodel import Field, SQLModel

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_USER = "ROLE_USER"
DEFAULT_ROLES = (ROLE_ADMIN, ROLE_USER)


class UserRole(SQLModel, table=True):
    """users <-> roles 연결 테이블"""

    __tablename__ = "user_roles"

    user_id: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        primary_key=True,
        ondelete="CASCADE",
    )
    role_id: Optional[int] = Field(
        default=None,
        foreign_key="roles.id",
        primary_key=True,
    )


class Role(SQLModel, table=True):
    """
    권한 (ROLE_ADMIN, ROLE_USER)
    """

    __tablename__ = "roles"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        sa_column_kwargs={"autoincrement": True},
    )

    name: str = Field(
        max_length=50,
        nullable=False,
        sa_column_kwargs={"unique": True},
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}')>"
