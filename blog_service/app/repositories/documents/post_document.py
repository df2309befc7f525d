from __future__ import annotations

from common.models.post import Post
from common.mongo.types import BaseDocument, PyObjectId, id_to_str


class PostDocument(BaseDocument):
    """MongoDB posts 컬렉션 도큐먼트 모델."""

    title: str
    summary: str
    content: str
    # 커버 없이 생성된 포스트는 필드 자체가 없을 수 있다.
    cover: str | None = None
    author_id: PyObjectId
    author_username: str

    @classmethod
    def from_domain(cls, post: Post) -> "PostDocument":
        return cls.from_model(post)

    def to_domain(self) -> Post:
        return Post(
            id=id_to_str(self.id),
            created_at=self.created_at,
            updated_at=self.updated_at,
            title=self.title,
            summary=self.summary,
            content=self.content,
            cover=self.cover or None,
            author_id=id_to_str(self.author_id) or "",
            author_username=self.author_username,
        )
