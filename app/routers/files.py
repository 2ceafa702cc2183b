# routers/files.py
"""
익명(공개) 파일 업로드 / 조회 / 다운로드
"""
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from app.schemas.common import ErrorDetails
from app.schemas.file import FileMetadataResponse, UploadResponse
from app.services.file_service import FileService
from app.utils.dependencies import get_file_service

router = APIRouter(prefix="/api/public/files", tags=["public-files"])

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def file_download_response(metadata, path) -> FileResponse:
    """Content-Disposition: attachment; filename="<원본 파일명>" """
    return FileResponse(
        path,
        filename=metadata.filename,
        media_type=metadata.mime_type or DEFAULT_MEDIA_TYPE,
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    summary="익명 파일 업로드",
    description="로그인 없이 파일을 업로드합니다. 7일 후 만료, 최대 3회 다운로드.",
    responses={400: {"model": ErrorDetails, "description": "파일 누락 또는 용량 초과"}},
)
async def upload_file(
    service: Annotated[FileService, Depends(get_file_service)],
    file: UploadFile = File(...),
):
    file_uuid = await service.upload_file(file)
    return UploadResponse(uuid=file_uuid)


@router.get(
    "/{uuid}",
    response_model=FileMetadataResponse,
    summary="파일 메타데이터 조회",
    responses={
        400: {"model": ErrorDetails, "description": "만료된 파일"},
        404: {"model": ErrorDetails, "description": "파일 없음"},
    },
)
async def get_file_metadata(
    uuid: str,
    service: Annotated[FileService, Depends(get_file_service)],
):
    metadata = await service.get_file_metadata(uuid)
    return FileMetadataResponse.from_entity(metadata)


@router.get(
    "/download/{uuid}",
    response_class=FileResponse,
    summary="파일 다운로드",
    responses={
        400: {"model": ErrorDetails, "description": "만료된 파일"},
        403: {"model": ErrorDetails, "description": "다운로드 횟수 초과"},
        404: {"model": ErrorDetails, "description": "파일 없음"},
    },
)
async def download_file(
    uuid: str,
    service: Annotated[FileService, Depends(get_file_service)],
):
    metadata, path = await service.download_file(uuid)
    return file_download_response(metadata, path)
