from __future__ import annotations

from pydantic import BaseModel

from common.models.user import Identity, User
from common.types.datetime import UtcDateTime


class CredentialsRequest(BaseModel):
    """회원가입/로그인 공용 요청 바디."""

    username: str = ""
    password: str = ""


class UserResponse(BaseModel):
    id: str
    username: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id or "", username=user.username)


class ProfileResponse(BaseModel):
    id: str
    username: str
    issued_at: UtcDateTime
    expires_at: UtcDateTime

    @classmethod
    def from_identity(cls, identity: Identity) -> "ProfileResponse":
        return cls(
            id=identity.user_id,
            username=identity.username,
            issued_at=identity.issued_at,
            expires_at=identity.expires_at,
        )
