"""
전역 예외 핸들러

모든 에러 응답은 ErrorDetails {message, stackTrace?} 형태이며
stackTrace는 PRODUCTION=false 이고 ERROR_INCLUDE_STACKTRACE=true 일 때만 포함됩니다.
"""
import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import AppError
from app.schemas.common import ErrorDetails

logger = logging.getLogger(__name__)

MISSING_FILE_MESSAGE = "Required file parameter is missing. Please provide a file to upload."
INVALID_JSON_MESSAGE = "Invalid Json format, check the post request body."
GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _stack_trace(exc: BaseException) -> Optional[str]:
    if not settings.include_stacktrace:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_response(status_code: int, message: str, exc: Optional[BaseException] = None,
                   headers: Optional[dict] = None) -> JSONResponse:
    details = ErrorDetails(
        message=message,
        stack_trace=_stack_trace(exc) if exc is not None else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=details.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _field_name(loc) -> str:
    # validate_default 필드는 기본값 검증 시 alias 대신 필드명으로 보고되므로 camelCase로 통일
    if not loc:
        return "unknown"
    field = str(loc[-1])
    return to_camel(field) if "_" in field else field


def _clean_message(msg: str) -> str:
    # pydantic이 ValueError 메시지 앞에 붙이는 접두어 제거
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


async def app_error_handler(request: Request, exc: AppError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    # 잘못된 JSON 본문
    if any(error.get("type") == "json_invalid" for error in errors):
        logger.warning(f"Invalid JSON body: {request.method} {request.url.path}")
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_JSON_MESSAGE, exc)

    # multipart 파일 파라미터 누락
    for error in errors:
        loc = error.get("loc") or ()
        if error.get("type") == "missing" and loc[:1] == ("body",) and "file" in loc:
            return error_response(status.HTTP_400_BAD_REQUEST, MISSING_FILE_MESSAGE, exc)

    field_errors = {}
    for error in errors:
        field = _field_name(error.get("loc"))
        message = _clean_message(error.get("msg", ""))
        if error.get("type") == "missing":
            message = f"{field} is required"
        field_errors.setdefault(field, message)

    for field, message in field_errors.items():
        logger.warning(f"Validation failed - {field}: {message}")

    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=field_errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"An unhandled error occurred: {exc}", exc_info=exc)

    if settings.PRODUCTION or not settings.ERROR_INCLUDE_STACKTRACE:
        message = GENERIC_ERROR_MESSAGE
    else:
        message = f"An unexpected server error occurred: {exc}"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
