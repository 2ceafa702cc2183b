from datetime import datetime
from typing import Optional

from pydantic import ConfigDict
from sqlalchemy import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel

from app.utils.datetime import utc_now


class BaseModel(SQLModel):
    """
    모든 테이블에 공통으로 포함되는 기본 필드:
    - created_at: 생성 시각 (UTC)
    - updated_at: 수정 시각 (UTC)
    """
    __abstract__ = True  # 이 클래스로 테이블이 만들어지지 않도록

    model_config = ConfigDict(from_attributes=True)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={
            "nullable": False,
            "server_default": func.now(),
            "comment": "레코드 생성일시 (UTC)",
        },
    )

    updated_at: Optional[datetime] = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={
            "nullable": True,
            "onupdate": utc_now,  # 파이썬 측에서 계산되어 flush 후에도 인스턴스에 남음
            "comment": "레코드 수정일시 (UTC)",
        },
    )
