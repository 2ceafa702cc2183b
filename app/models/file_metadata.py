from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, SQLModel

from app.models.user import User
from app.utils.datetime import utc_now


class FileMetadata(SQLModel, table=True):
    """
    업로드된 파일 메타데이터
    - 실제 파일은 STORAGE_PATH/<uuid><확장자> 로 저장
    - owner가 없으면 익명(public) 업로드
    """

    __tablename__ = "file_metadata"

    uuid: str = Field(primary_key=True, max_length=36)

    filename: str = Field(max_length=255, nullable=False, description="원본 파일명")

    size: int = Field(default=0, sa_type=BigInteger, nullable=False)

    mime_type: Optional[str] = Field(default=None, max_length=255)

    upload_date: datetime = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        nullable=False,
    )

    expiry_date: datetime = Field(
        sa_type=TIMESTAMP(timezone=True),
        nullable=False,
        index=True,
    )

    download_count: int = Field(default=0, nullable=False)

    user_id: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    is_public: bool = Field(default=True, nullable=False)

    owner: Optional[User] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def extension(self) -> str:
        """원본 파일명의 마지막 '.'부터 (없으면 빈 문자열)"""
        if "." in self.filename:
            return self.filename[self.filename.rindex("."):]
        return ""

    @property
    def stored_filename(self) -> str:
        return f"{self.uuid}{self.extension}"

    def __repr__(self) -> str:
        return (
            f"<FileMetadata(uuid='{self.uuid}', filename='{self.filename}', size={self.size}, "
            f"upload_date={self.upload_date}, expiry_date={self.expiry_date}, "
            f"download_count={self.download_count})>"
        )
