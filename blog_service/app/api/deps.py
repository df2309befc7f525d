from __future__ import annotations

from fastapi import Depends, Request

from common.models.user import Identity

from ..auth.gate import AccessGate
from ..config import AppConfig, get_app_config
from ..services.posts_service import get_access_gate


BEARER_PREFIX = "Bearer "


def extract_token(request: Request, cookie_name: str) -> str | None:
    """세션 쿠키를 우선 사용하고, 없으면 Authorization: Bearer 헤더를 본다."""

    token = request.cookies.get(cookie_name)
    if token:
        return token

    auth = request.headers.get("Authorization", "")
    if auth.startswith(BEARER_PREFIX):
        return auth[len(BEARER_PREFIX):].strip() or None
    return None


def get_current_identity(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
    config: AppConfig = Depends(get_app_config),
) -> Identity:
    """보호된 엔드포인트용 의존성. 유효한 토큰이 없으면 401."""

    token = extract_token(request, config.auth.cookie_name)
    return gate.require_authenticated(token)
