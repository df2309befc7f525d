from datetime import datetime

from pydantic import BaseModel, Field


class PostFields(BaseModel):
    """작성자가 수정할 수 있는 포스트 본문 필드."""

    title: str
    summary: str
    content: str


class Post(BaseModel):
    """게시글 도메인 모델 (API/저장소에서 공통 사용)

    - author_id 는 생성 시점에 인증된 유저로 고정되며 이후 변경되지 않는다.
    - author_username 은 생성 시점에 비정규화해 저장한다. (username 은 불변)
    """

    id: str | None = Field(default=None, alias="id")
    created_at: datetime = Field(alias="created_at")
    updated_at: datetime = Field(alias="updated_at")
    title: str
    summary: str
    content: str
    cover: str | None = Field(default=None, alias="cover")
    author_id: str = Field(alias="author_id")
    author_username: str = Field(alias="author_username")


class PageWindow(BaseModel):
    """최신순으로 정렬된 포스트 컬렉션의 한 페이지."""

    page: int
    page_size: int
    total_items: int
    total_pages: int
    items: list[Post] = Field(default_factory=list)
