from __future__ import annotations

import logging

from fastapi import Depends
from pymongo.database import Database

from common.models.post import PageWindow, Post, PostFields
from common.models.user import Identity
from common.mongo.client import get_database
from common.types.datetime import utc_now

from ..auth.gate import AccessGate
from ..auth.tokens import TokenIssuer
from ..config import AppConfig, get_app_config
from ..exceptions import NotFound, ValidationFailure
from ..repositories.interfaces import PostRepositoryInterface
from ..repositories.post_repository import PostRepository
from ..storage.covers import CloudinaryCoverStorage, CoverStorageInterface, CoverUpload
from .pagination import PageRequest, build_window
from .users_service import get_token_issuer

logger = logging.getLogger(__name__)


MAX_TITLE_LENGTH = 200
MAX_SUMMARY_LENGTH = 500


def validate_fields(fields: PostFields) -> PostFields:
    """title/summary/content 는 모두 필수이며 공백만으로 채울 수 없다."""

    title = fields.title.strip()
    summary = fields.summary.strip()
    if not title:
        raise ValidationFailure("title is required")
    if not summary:
        raise ValidationFailure("summary is required")
    if not fields.content.strip():
        raise ValidationFailure("content is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationFailure(f"title must be at most {MAX_TITLE_LENGTH} characters")
    if len(summary) > MAX_SUMMARY_LENGTH:
        raise ValidationFailure(
            f"summary must be at most {MAX_SUMMARY_LENGTH} characters"
        )
    return PostFields(title=title, summary=summary, content=fields.content)


class PostsService:
    """포스트 CRUD 및 페이지 조회 비즈니스 로직.

    - 작성자 검증은 AccessGate 를 통해 수행하며, 쓰기 작업 전에 항상 먼저 실행한다.
    - 커버 업로드는 검증(존재/작성자/필드)을 모두 통과한 뒤에만 수행한다.
    """

    def __init__(
        self,
        post_repo: PostRepositoryInterface,
        gate: AccessGate,
        cover_storage: CoverStorageInterface,
    ) -> None:
        self._post_repo = post_repo
        self._gate = gate
        self._cover_storage = cover_storage

    def create_post(
        self,
        identity: Identity,
        fields: PostFields,
        cover: CoverUpload | None = None,
    ) -> Post:
        fields = validate_fields(fields)
        cover_url = self._cover_storage.upload(cover) if cover is not None else None

        now = utc_now()
        post = Post(
            created_at=now,
            updated_at=now,
            title=fields.title,
            summary=fields.summary,
            content=fields.content,
            cover=cover_url,
            # 작성자는 클라이언트 입력이 아닌 인증된 identity 로만 정한다.
            author_id=identity.user_id,
            author_username=identity.username,
        )
        created = self._post_repo.insert(post)

        logger.info(
            "post created",
            extra={"user_id": identity.user_id, "post_id": created.id},
        )
        return created

    def update_post(
        self,
        post_id: str,
        identity: Identity,
        fields: PostFields,
        cover: CoverUpload | None = None,
    ) -> Post:
        """작성자만 수정할 수 있다. cover 가 None 이면 기존 커버를 유지한다."""

        post = self.get_post(post_id)
        self._gate.require_author(post, identity)
        fields = validate_fields(fields)

        updates: dict = {
            "title": fields.title,
            "summary": fields.summary,
            "content": fields.content,
        }
        if cover is not None:
            updates["cover"] = self._cover_storage.upload(cover)

        updated = self._post_repo.update_fields(post_id, updates)
        if updated is None:
            # 조회와 갱신 사이에 삭제된 경우
            raise NotFound("post not found")

        logger.info(
            "post updated",
            extra={"user_id": identity.user_id, "post_id": post_id},
        )
        return updated

    def delete_post(self, post_id: str, identity: Identity) -> None:
        post = self.get_post(post_id)
        self._gate.require_author(post, identity)

        if not self._post_repo.delete_by_id(post_id):
            raise NotFound("post not found")

        logger.info(
            "post deleted",
            extra={"user_id": identity.user_id, "post_id": post_id},
        )

    def get_post(self, post_id: str) -> Post:
        post = self._post_repo.find_by_id(post_id)
        if post is None:
            raise NotFound("post not found")
        return post

    def list_page(self, page: int, page_size: int) -> PageWindow:
        request = PageRequest(page=page, page_size=page_size)
        items, total = self._post_repo.list(skip=request.skip, limit=request.page_size)
        return build_window(request, items, total)


def get_access_gate(issuer: TokenIssuer = Depends(get_token_issuer)) -> AccessGate:
    """FastAPI DI용 AccessGate 팩토리."""

    return AccessGate(issuer)


def get_post_repository(
    db: Database = Depends(get_database),
) -> PostRepositoryInterface:
    """FastAPI DI용 PostRepository 팩토리."""

    return PostRepository(db)


def get_cover_storage(
    config: AppConfig = Depends(get_app_config),
) -> CoverStorageInterface:
    """FastAPI DI용 커버 스토리지 팩토리."""

    return CloudinaryCoverStorage(config.uploads)


def get_posts_service(
    post_repo: PostRepositoryInterface = Depends(get_post_repository),
    gate: AccessGate = Depends(get_access_gate),
    cover_storage: CoverStorageInterface = Depends(get_cover_storage),
) -> PostsService:
    """FastAPI DI용 PostsService 팩토리."""

    return PostsService(post_repo, gate, cover_storage)
