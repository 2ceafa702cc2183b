"""
서비스 계층에서 발생시키는 도메인 예외

각 예외는 HTTP 상태 코드를 가지고 있으며
app.core.exception_handlers 에서 ErrorDetails 응답으로 변환됩니다.
"""
from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    """잘못된 요청 / 비즈니스 규칙 위반 (400)"""
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    """인증 실패 (401)"""
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """권한 없음, 다운로드 한도 초과 등 (403)"""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    """리소스 없음 (404)"""
    status_code = status.HTTP_404_NOT_FOUND
