from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from common.models.user import Identity

from ..config import AuthConfig
from ..exceptions import InvalidToken, Unauthenticated


JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "username", "iat", "exp"]


class TokenIssuer:
    """세션 토큰(JWT) 발급/검증기.

    - 서버에 세션을 저장하지 않으며, 유효성은 서명과 만료 시각으로만 판단한다.
    - 설정(AuthConfig)은 생성 시점에 주입받고 이후 변경되지 않는다.
    """

    def __init__(self, config: AuthConfig) -> None:
        self._secret = config.jwt_secret
        self._ttl = timedelta(hours=config.token_ttl_hours)

    def issue(self, user_id: str, username: str, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str | None) -> Identity:
        if not token or not token.strip():
            raise Unauthenticated()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        user_id = payload.get("sub")
        username = payload.get("username")
        if not isinstance(user_id, str) or not isinstance(username, str):
            raise InvalidToken()

        return Identity(
            user_id=user_id,
            username=username,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
