from __future__ import annotations

import logging

from fastapi import Depends
from pymongo.database import Database

from common.models.user import Identity, User
from common.mongo.client import get_database
from common.types.datetime import utc_now

from ..auth.passwords import PasswordHasher
from ..auth.tokens import TokenIssuer
from ..config import AppConfig, get_app_config
from ..exceptions import UpstreamFailure, ValidationFailure
from ..repositories.interfaces import DuplicateUsername, UserRepositoryInterface
from ..repositories.user_repository import UserRepository


logger = logging.getLogger(__name__)


class UsersService:
    """회원가입/로그인 비즈니스 로직.

    - Repository(UserRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 로그인 성공 시 TokenIssuer 로 세션 토큰을 발급한다.
    """

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        issuer: TokenIssuer,
        hasher: PasswordHasher | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._issuer = issuer
        self._hasher = hasher or PasswordHasher()

    def register(self, username: str, password: str) -> User:
        username = (username or "").strip()
        if not username:
            raise ValidationFailure("username is required")
        if not password or not password.strip():
            raise ValidationFailure("password is required")

        if self._user_repo.find_by_username(username) is not None:
            raise ValidationFailure("username already taken")

        now = utc_now()
        user = User(
            username=username,
            password_hash=self._hasher.hash(password),
            created_at=now,
            updated_at=now,
        )
        try:
            created = self._user_repo.insert(user)
        except DuplicateUsername as exc:
            raise ValidationFailure("username already taken") from exc

        logger.info("user registered", extra={"user_id": created.id})
        return created

    def login(self, username: str, password: str) -> tuple[User, str]:
        """자격 증명을 확인하고 (유저, 세션 토큰)을 반환한다."""

        user = self._user_repo.find_by_username((username or "").strip())
        if user is None:
            raise ValidationFailure("user not found")

        if not self._hasher.verify(password or "", user.password_hash):
            logger.warning("login failed: wrong credentials", extra={"user_id": user.id})
            raise ValidationFailure("wrong credentials")

        if user.id is None:
            raise UpstreamFailure("stored user has no id")
        token = self._issuer.issue(user.id, user.username)
        logger.info("user logged in", extra={"user_id": user.id})
        return user, token

    @staticmethod
    def profile(identity: Identity) -> Identity:
        return identity


def get_token_issuer(config: AppConfig = Depends(get_app_config)) -> TokenIssuer:
    """FastAPI DI용 TokenIssuer 팩토리."""

    return TokenIssuer(config.auth)


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_users_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(user_repo=user_repo, issuer=issuer)
