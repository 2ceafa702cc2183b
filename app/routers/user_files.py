# routers/user_files.py
"""
로그인 사용자 파일 (ROLE_USER / ROLE_ADMIN)
"""
from typing import Annotated, List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from app.routers.files import file_download_response
from app.schemas.common import ErrorDetails, MessageResponse
from app.schemas.file import FileMetadataResponse, UploadResponse
from app.services.file_service import FileService
from app.utils.dependencies import CurrentUser, get_file_service

router = APIRouter(prefix="/user/files", tags=["user-files"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="파일 업로드",
    description="로그인 사용자 업로드. 30일 후 만료, 최대 100회 다운로드.",
    responses={400: {"model": ErrorDetails, "description": "파일 누락 또는 용량 초과"}},
)
async def upload_file(
    current_user: CurrentUser,
    service: Annotated[FileService, Depends(get_file_service)],
    file: UploadFile = File(...),
):
    file_uuid = await service.upload_file_for_user(file, current_user)
    return UploadResponse(uuid=file_uuid, message="File uploaded successfully")


@router.get(
    "",
    response_model=List[FileMetadataResponse],
    summary="내 파일 목록",
    description="업로드 최신순",
)
async def get_user_files(
    current_user: CurrentUser,
    service: Annotated[FileService, Depends(get_file_service)],
):
    files = await service.get_user_files(current_user)
    return [FileMetadataResponse.from_entity(metadata) for metadata in files]


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
    current_user: CurrentUser,
    service: Annotated[FileService, Depends(get_file_service)],
):
    metadata = await service.get_file_metadata(uuid)
    return FileMetadataResponse.from_entity(metadata)


@router.get(
    "/download/{uuid}",
    response_class=FileResponse,
    summary="파일 다운로드",
    description="소유자 또는 공개 파일만 다운로드 가능",
    responses={
        403: {"model": ErrorDetails, "description": "권한 없음 또는 다운로드 횟수 초과"},
        404: {"model": ErrorDetails, "description": "파일 없음"},
    },
)
async def download_file(
    uuid: str,
    current_user: CurrentUser,
    service: Annotated[FileService, Depends(get_file_service)],
):
    metadata, path = await service.download_file(uuid, current_user)
    return file_download_response(metadata, path)


@router.delete(
    "/{uuid}",
    response_model=MessageResponse,
    summary="파일 삭제",
    responses={404: {"model": ErrorDetails, "description": "파일이 없거나 소유자가 아님"}},
)
async def delete_file(
    uuid: str,
    current_user: CurrentUser,
    service: Annotated[FileService, Depends(get_file_service)],
):
    await service.delete_user_file(uuid, current_user)
    return MessageResponse(message="File deleted successfully")
