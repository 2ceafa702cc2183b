# routers/user.py
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.schemas.common import ApiResponse, ErrorDetails
from app.schemas.user import (
    ChangePasswordRequest,
    EmailVerificationRequest,
    UserProfileResponse,
    UserStats,
)
from app.services.user_service import UserService
from app.utils.dependencies import CurrentUser, get_user_service

# 라우터 생성
router = APIRouter(prefix="/user", tags=["user"])


@router.get(
    "/profile",
    response_model=ApiResponse[UserProfileResponse],
    summary="내 프로필 조회",
    responses={
        400: {"model": ErrorDetails, "description": "비활성 계정"},
        401: {"model": ErrorDetails, "description": "인증 실패 또는 토큰 없음"},
    },
)
async def get_profile(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    profile = await service.get_user_profile(current_user.username)
    return ApiResponse(data=profile, message="Profile retrieved successfully")


@router.post(
    "/profile-picture",
    response_model=ApiResponse[UserProfileResponse],
    summary="프로필 사진 업로드",
    description="이미지 파일(image/*), 최대 5MB. 기존 사진은 교체됩니다.",
    responses={400: {"model": ErrorDetails, "description": "빈 파일, 용량 초과, 이미지 아님"}},
)
async def upload_profile_picture(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
    file: UploadFile = File(...),
):
    profile = await service.upload_profile_picture(current_user.username, file)
    return ApiResponse(data=profile, message="Profile picture uploaded successfully")


@router.delete(
    "/profile-picture",
    response_model=ApiResponse[None],
    summary="프로필 사진 삭제",
)
async def delete_profile_picture(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.delete_profile_picture(current_user.username)
    return ApiResponse(message="Profile picture deleted successfully")


@router.post(
    "/change_password",
    response_model=ApiResponse[None],
    summary="비밀번호 변경",
    responses={400: {"model": ErrorDetails, "description": "기존 비밀번호 불일치 등"}},
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.change_password(current_user.username, request)
    return ApiResponse(message="Password changed successfully")


@router.post(
    "/deactivate",
    response_model=ApiResponse[None],
    summary="계정 비활성화",
    responses={400: {"model": ErrorDetails, "description": "이미 비활성화된 계정"}},
)
async def deactivate_account(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.deactivate_account(current_user.username)
    return ApiResponse(message="Account deactivated successfully")


@router.post(
    "/send-verification-email",
    response_model=ApiResponse[None],
    summary="인증 메일 (재)발송",
    description="LOCAL 계정만 가능. 24시간 유효한 인증 링크를 메일로 보냅니다.",
    responses={400: {"model": ErrorDetails, "description": "LOCAL 계정 아님 또는 이미 인증됨"}},
)
async def send_verification_email(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.resend_verification_email(current_user.username)
    return ApiResponse(message="Verification email sent successfully")


@router.post(
    "/verify-email",
    response_model=ApiResponse[None],
    summary="이메일 인증",
    description="메일로 받은 토큰으로 이메일을 인증하고 계정을 활성화합니다 (인증 불필요).",
    responses={400: {"model": ErrorDetails, "description": "잘못되었거나 만료된 토큰"}},
)
async def verify_email(
    request: EmailVerificationRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.verify_email(request.token)
    return ApiResponse(message="Email verified successfully")


@router.get(
    "/stats",
    response_model=ApiResponse[UserStats],
    summary="내 파일 통계",
)
async def get_stats(
    current_user: CurrentUser,
    service: Annotated[UserService, Depends(get_user_service)],
):
    stats = await service.get_user_stats(current_user.username)
    return ApiResponse(data=stats, message="Statistics retrieved successfully")
