"""
Main.py works as a main function for the application
Api app starts from here
"""

from contextlib import asynccontextmanager
from logging import getLogger
from logging.config import dictConfig
import asyncio

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.exception_handlers import register_exception_handlers
from app.core.metrics import MetricsMiddleware
from app.database import get_async_session_context, init_db
from app.routers import (actuator_router, auth_router, config_router,
                         files_router, user_files_router, user_router)
from app.services.file_cleanup_scheduler import FileCleanupScheduler
from app.utils.logger import build_logging_config
from app.utils.seed_data import init_seed_data
from app.utils.storage import ensure_directory


# ----------------------------------------------------------------------
# Lifespan: 앱 시작 시 DB / 저장소 초기화 및 백그라운드 태스크 관리
# ----------------------------------------------------------------------
def log_background_task_exit(task: asyncio.Task) -> None:
    """취소가 아닌 이유로 끝난 백그라운드 태스크를 에러로 기록"""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"백그라운드 태스크 비정상 종료: {task.get_name()}: {exc}", exc_info=exc)
    else:
        logger.error(f"백그라운드 태스크가 예기치 않게 종료됨: {task.get_name()}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 저장소 디렉토리 (생성 실패 시 시작 중단)
    ensure_directory(settings.STORAGE_PATH)
    ensure_directory(settings.PROFILE_PICTURES_DIR)
    logger.info(f"파일 저장소: {settings.STORAGE_PATH}")

    # DB 초기화
    await init_db()

    # 초기 데이터 시딩 (Role, 관리자 계정)
    async with get_async_session_context() as session:
        await init_seed_data(session)

    # 백그라운드 태스크 시작
    tasks = []

    # 만료 파일 정리 스케줄러
    if settings.CLEANUP_ENABLED:
        scheduler = FileCleanupScheduler()
        task = asyncio.create_task(scheduler.run())
        task.add_done_callback(log_background_task_exit)
        tasks.append(task)
        logger.info("File Cleanup Scheduler 시작됨")

    yield

    # 앱 종료 시 백그라운드 태스크 정리
    logger.info("백그라운드 태스크 종료 중...")
    for task in tasks:
        task.cancel()

    await asyncio.gather(*tasks, return_exceptions=True)
    logger.info("백그라운드 태스크 정리 완료")


logger = getLogger(__name__)

# ----------------------------------------------------------------------
# FastAPI 애플리케이션 생성
# ----------------------------------------------------------------------
_docs_enabled = settings.DEPLOY_PHASE in ("dev", "local")

app = FastAPI(
    title="ProximaShare",
    description="FastAPI 기반 임시 파일 공유 백엔드 API",
    version=settings.PROJECT_VERSION,
    docs_url="/swagger-ui.html" if _docs_enabled else None,
    redoc_url=None,
    openapi_url="/v3/api-docs" if _docs_enabled else None,
    lifespan=lifespan,
)

# ----------------------------------------------------------------------
# 로거 설정
# ----------------------------------------------------------------------
dictConfig(build_logging_config(settings.LOG_LEVEL))

# ----------------------------------------------------------------------
# 예외 핸들러
# ----------------------------------------------------------------------
register_exception_handlers(app)

# ----------------------------------------------------------------------
# 미들웨어 (CORS, 메트릭)
# ----------------------------------------------------------------------
app.add_middleware(MetricsMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------
# 라우터 등록
# ----------------------------------------------------------------------
app.include_router(auth_router)  # 회원가입 / 로그인
app.include_router(config_router)  # 공개 설정 (Role 목록)
app.include_router(files_router)  # 익명 파일 공유
app.include_router(user_files_router)  # 사용자 파일
app.include_router(user_router)  # 사용자 계정
app.include_router(actuator_router)  # 헬스 체크 / 메트릭

# 프로필 사진 정적 파일
app.mount(
    "/uploads/profile-pictures",
    StaticFiles(directory=settings.PROFILE_PICTURES_DIR, check_dir=False),
    name="profile-pictures",
)
