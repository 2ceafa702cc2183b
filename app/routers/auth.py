# routers/auth.py
from typing import Annotated

from fastapi import APIRouter, Depends

from app.schemas.auth import (
    GoogleLoginData,
    GoogleLoginRequest,
    LoginData,
    LoginRequest,
    RegistrationRequest,
    UserData,
)
from app.schemas.common import ApiResponse, ErrorDetails
from app.services.auth_service import AuthService
from app.utils.dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserData],
    response_model_exclude_none=True,
    summary="회원가입",
    description="LOCAL 계정을 생성합니다. 이메일 인증 전까지 계정은 비활성 상태입니다.",
    responses={
        400: {"model": ErrorDetails, "description": "중복 username/email, 잘못된 role 또는 검증 실패"},
    },
)
async def register(
    request: RegistrationRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    user = await service.register(request)
    return ApiResponse(data=UserData.from_user(user), message="User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    summary="로그인",
    description="username/password 로그인 후 JWT 발급",
    responses={
        400: {"model": ErrorDetails, "description": "잘못된 username 또는 password"},
    },
)
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    user, token = await service.login(request.username, request.password)
    data = LoginData(id=user.id, username=user.username, roles=user.role_names, token=token)
    return ApiResponse(data=data, message="Logged in successfully")


@router.post(
    "/login/google",
    response_model=ApiResponse[GoogleLoginData],
    summary="Google 로그인",
    description="Google ID 토큰을 검증하고 JWT 발급 (최초 로그인 시 계정 생성)",
    responses={
        400: {"model": ErrorDetails, "description": "LOCAL 계정과 이메일 중복"},
        401: {"model": ErrorDetails, "description": "ID 토큰 검증 실패"},
    },
)
async def login_with_google(
    request: GoogleLoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    user, token = await service.login_with_google(request.id_token)
    data = GoogleLoginData(
        id=user.id,
        username=user.username,
        roles=user.role_names,
        token=token,
        email=user.email,
        profile_picture_url=user.profile_picture_url,
        auth_provider=user.auth_provider,
    )
    return ApiResponse(data=data, message="Logged in successfully with Google")
