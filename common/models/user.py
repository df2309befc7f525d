from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """유저 도메인 모델.

    - Mongo users 컬렉션과 1:1로 매핑되는 공용 모델이다.
    - username 은 유니크하며 가입 이후 변경되지 않는다.
    - password_hash 는 저장소/서비스 내부에서만 사용하고 API 응답에는 노출하지 않는다.
    """

    id: str | None = Field(default=None, alias="id")
    username: str = Field(alias="username")
    password_hash: str = Field(alias="password_hash")
    created_at: datetime = Field(alias="created_at")
    updated_at: datetime = Field(alias="updated_at")


class Identity(BaseModel):
    """검증된 세션 토큰에서 복원한 인증 주체."""

    user_id: str
    username: str
    issued_at: datetime
    expires_at: datetime
