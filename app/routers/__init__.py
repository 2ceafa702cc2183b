"""
컨트롤러 모듈

API 엔드포인트들을 정의합니다.
외부 HTTP 요청을 직접 받는 엔드포인트입니다.
요청을 받아 적절한 서비스로 라우팅합니다.
"""

from .actuator import router as actuator_router
from .auth import router as auth_router
from .config import router as config_router
from .files import router as files_router
from .user import router as user_router
from .user_files import router as user_files_router

__all__ = [
    "actuator_router",
    "auth_router",
    "config_router",
    "files_router",
    "user_router",
    "user_files_router",
]
