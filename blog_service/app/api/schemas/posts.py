from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from common.models.post import PageWindow, Post
from common.types.datetime import UtcDateTime


class AuthorResponse(BaseModel):
    id: str
    username: str


class PostResponse(BaseModel):
    """포스트 응답 DTO.

    도메인 모델(Post)을 그대로 노출하지 않고, API 경계를 위한 전용 응답 모델을 사용한다.
    """

    id: str | None
    title: str
    summary: str
    content: str
    cover: str | None = None
    author: AuthorResponse
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            summary=post.summary,
            content=post.content,
            cover=post.cover,
            author=AuthorResponse(id=post.author_id, username=post.author_username),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class ListPostsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    posts: list[PostResponse]
    total: int
    page: int
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def from_window(cls, window: PageWindow) -> "ListPostsResponse":
        return cls(
            posts=[PostResponse.from_domain(post) for post in window.items],
            total=window.total_items,
            page=window.page,
            total_pages=window.total_pages,
        )


class DeletePostResponse(BaseModel):
    success: bool = True
