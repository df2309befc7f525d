from __future__ import annotations

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from blog_service.app.auth.gate import AccessGate
from blog_service.app.auth.tokens import TokenIssuer
from blog_service.app.config import (
    AppConfig,
    AuthConfig,
    CorsConfig,
    PaginationConfig,
    UploadsConfig,
)
from blog_service.app.repositories.interfaces import (
    DuplicateUsername,
    PostRepositoryInterface,
    UserRepositoryInterface,
)
from blog_service.app.services.posts_service import PostsService
from blog_service.app.services.users_service import UsersService
from blog_service.app.storage.covers import (
    CoverStorageInterface,
    CoverUpload,
    validate_cover_format,
)
from common.models.post import Post
from common.models.user import Identity, User
from common.types.datetime import utc_now


class FakeUserRepository(UserRepositoryInterface):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def find_by_username(self, username: str) -> User | None:
        user = self.users.get(username)
        return user.model_copy() if user is not None else None

    def insert(self, user: User) -> User:
        if user.username in self.users:
            raise DuplicateUsername(user.username)
        stored = user.model_copy(update={"id": str(ObjectId())})
        self.users[stored.username] = stored
        return stored.model_copy()


class FakePostRepository(PostRepositoryInterface):
    """삽입 순서를 기억하는 인메모리 posts 컬렉션.

    정렬은 Mongo 구현과 같은 created_at desc, 삽입 순서 desc 이다.
    """

    def __init__(self) -> None:
        self.posts: dict[str, Post] = {}
        self._order: dict[str, int] = {}
        self._seq = 0
        self.list_calls: list[tuple[int, int]] = []

    def insert(self, post: Post) -> Post:
        now = utc_now()
        return self.seed(post.model_copy(update={"created_at": now, "updated_at": now}))

    def seed(self, post: Post) -> Post:
        """created_at 을 그대로 보존하며 저장한다. (정렬 테스트용)"""

        stored = post.model_copy(update={"id": str(ObjectId())})
        assert stored.id is not None
        self._seq += 1
        self.posts[stored.id] = stored
        self._order[stored.id] = self._seq
        return stored.model_copy()

    def find_by_id(self, id_value: str) -> Post | None:
        post = self.posts.get(id_value)
        return post.model_copy() if post is not None else None

    def update_fields(self, id_value: str, updates: dict) -> Post | None:
        post = self.posts.get(id_value)
        if post is None:
            return None
        updated = post.model_copy(update={**updates, "updated_at": utc_now()})
        self.posts[id_value] = updated
        return updated.model_copy()

    def delete_by_id(self, id_value: str) -> bool:
        self._order.pop(id_value, None)
        return self.posts.pop(id_value, None) is not None

    def list(self, skip: int, limit: int) -> tuple[list[Post], int]:
        self.list_calls.append((skip, limit))
        ordered = sorted(
            self.posts.values(),
            key=lambda p: (p.created_at, self._order[p.id or ""]),
            reverse=True,
        )
        return [p.model_copy() for p in ordered[skip : skip + limit]], len(ordered)


class FakeCoverStorage(CoverStorageInterface):
    def __init__(self) -> None:
        self.uploaded: list[str] = []

    def upload(self, cover: CoverUpload) -> str:
        validate_cover_format(cover, ("jpg", "jpeg", "png"))
        self.uploaded.append(cover.filename)
        return f"https://covers.example.com/{cover.filename}"


def build_post(
    *,
    author_id: str = "author-1",
    author_username: str = "alice",
    title: str = "Hello",
    created_at: datetime | None = None,
    cover: str | None = None,
) -> Post:
    created_at = created_at or utc_now()
    return Post(
        created_at=created_at,
        updated_at=created_at,
        title=title,
        summary="summary",
        content="<p>content</p>",
        cover=cover,
        author_id=author_id,
        author_username=author_username,
    )


def build_identity(user_id: str = "author-1", username: str = "alice") -> Identity:
    now = datetime.now(timezone.utc)
    return Identity(user_id=user_id, username=username, issued_at=now, expires_at=now)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        auth=AuthConfig(jwt_secret="test-secret", token_ttl_hours=24),
        cors=CorsConfig(),
        pagination=PaginationConfig(default_page_size=10, max_page_size=100),
        uploads=UploadsConfig(),
    )


@pytest.fixture
def issuer(app_config: AppConfig) -> TokenIssuer:
    return TokenIssuer(app_config.auth)


@pytest.fixture
def gate(issuer: TokenIssuer) -> AccessGate:
    return AccessGate(issuer)


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def post_repo() -> FakePostRepository:
    return FakePostRepository()


@pytest.fixture
def cover_storage() -> FakeCoverStorage:
    return FakeCoverStorage()


@pytest.fixture
def users_service(user_repo: FakeUserRepository, issuer: TokenIssuer) -> UsersService:
    return UsersService(user_repo=user_repo, issuer=issuer)


@pytest.fixture
def posts_service(
    post_repo: FakePostRepository,
    gate: AccessGate,
    cover_storage: FakeCoverStorage,
) -> PostsService:
    return PostsService(post_repo, gate, cover_storage)


@pytest.fixture
def make_post():
    return build_post


@pytest.fixture
def make_identity():
    return build_identity
