from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from common.models.user import Identity

from ..config import AppConfig, get_app_config
from ..services.users_service import UsersService, get_users_service
from .deps import get_current_identity
from .schemas.users import CredentialsRequest, ProfileResponse, UserResponse


router = APIRouter()


@router.post("/register", response_model=UserResponse, summary="회원가입")
def register(
    body: CredentialsRequest,
    service: UsersService = Depends(get_users_service),
) -> UserResponse:
    user = service.register(body.username, body.password)
    return UserResponse.from_domain(user)


@router.post(
    "/login",
    response_model=UserResponse,
    summary="로그인",
    description="자격 증명이 맞으면 세션 토큰을 HTTP-only 쿠키로 내려준다.",
)
def login(
    body: CredentialsRequest,
    response: Response,
    service: UsersService = Depends(get_users_service),
    config: AppConfig = Depends(get_app_config),
) -> UserResponse:
    user, token = service.login(body.username, body.password)
    response.set_cookie(
        key=config.auth.cookie_name,
        value=token,
        max_age=config.auth.token_ttl_hours * 3600,
        httponly=True,
        secure=config.auth.cookie_secure,
        samesite="none",
    )
    return UserResponse.from_domain(user)


@router.get("/profile", response_model=ProfileResponse, summary="현재 로그인 유저")
def profile(identity: Identity = Depends(get_current_identity)) -> ProfileResponse:
    return ProfileResponse.from_identity(UsersService.profile(identity))


@router.post("/logout", summary="로그아웃 (쿠키 제거)")
def logout(
    response: Response,
    config: AppConfig = Depends(get_app_config),
) -> str:
    response.delete_cookie(
        key=config.auth.cookie_name,
        httponly=True,
        secure=config.auth.cookie_secure,
        samesite="none",
    )
    return "ok"
