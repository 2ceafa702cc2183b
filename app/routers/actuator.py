# routers/actuator.py
"""
헬스 체크 / 애플리케이션 정보 / Prometheus 메트릭
"""
from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.core.config import settings
from app import database

router = APIRouter(prefix="/actuator", tags=["actuator"])


@router.get("/health", summary="헬스 체크")
async def health():
    db_up = await database.ping_db()
    overall = "UP" if db_up else "DOWN"
    return JSONResponse(
        status_code=status.HTTP_200_OK if db_up else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": overall,
            "components": {"db": {"status": overall}},
        },
    )


@router.get("/info", summary="애플리케이션 정보")
async def info():
    return {
        "app": {
            "name": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
            "phase": settings.DEPLOY_PHASE,
        }
    }


@router.get("/prometheus", summary="Prometheus 메트릭")
async def prometheus():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
