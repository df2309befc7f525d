from __future__ import annotations

from typing import Protocol

from common.models.post import Post
from common.models.user import User


class UserRepositoryInterface(Protocol):
    """UserRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    """

    def find_by_username(self, username: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def insert(self, user: User) -> User:  # pragma: no cover - Protocol
        """새 유저를 저장한다. username 이 이미 있으면 DuplicateUsername 을 발생시킨다."""
        ...


class PostRepositoryInterface(Protocol):
    """PostRepository가 따라야 할 최소한의 계약."""

    def insert(self, post: Post) -> Post:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, id_value: str) -> Post | None:  # pragma: no cover - Protocol
        ...

    def update_fields(
        self, id_value: str, updates: dict
    ) -> Post | None:  # pragma: no cover - Protocol
        """갱신 후의 포스트를 반환한다. 대상이 없으면 None."""
        ...

    def delete_by_id(self, id_value: str) -> bool:  # pragma: no cover - Protocol
        ...

    def list(
        self, skip: int, limit: int
    ) -> tuple[list[Post], int]:  # pragma: no cover - Protocol
        """created_at desc, _id desc 순으로 skip/limit 구간과 전체 개수를 반환한다."""
        ...


class DuplicateUsername(Exception):
    """users 컬렉션의 username 유니크 제약 위반."""
