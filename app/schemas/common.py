from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    JSON은 camelCase(프론트엔드 규약), 파이썬 쪽은 snake_case
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """
    공통 성공 응답 래퍼 {data, message}
    """
    data: Optional[T] = Field(None, description="응답 데이터")
    message: str = Field(..., description="결과 메시지")


class MessageResponse(CamelModel):
    message: str


class ErrorDetails(CamelModel):
    """
    에러 응답 스키마 (stackTrace는 개발 환경에서만 포함)
    """
    message: str = Field(..., description="에러 메시지")
    stack_trace: Optional[str] = Field(None, description="스택 트레이스")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"message": "File not found or expired"}
        }
    )


def require_text(value: Optional[str], message: str) -> str:
    """@NotBlank 대응: None/공백 문자열이면 message로 검증 실패"""
    if value is None or not str(value).strip():
        raise ValueError(message)
    return value
