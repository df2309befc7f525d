from __future__ import annotations

import math
from dataclasses import dataclass

from common.models.post import PageWindow, Post

from ..exceptions import ValidationFailure


@dataclass(frozen=True, slots=True)
class PageRequest:
    """1부터 시작하는 페이지 번호와 페이지 크기."""

    page: int
    page_size: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationFailure(f"page must be >= 1, got: {self.page}")
        if self.page_size < 1:
            raise ValidationFailure(f"page_size must be >= 1, got: {self.page_size}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


def count_pages(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size)


def build_window(request: PageRequest, items: list[Post], total_items: int) -> PageWindow:
    """조회 결과로 PageWindow 를 만든다.

    요청 페이지가 total_pages 를 넘으면 items 는 비어 있을 뿐 에러가 아니다.
    페이지 번호 보정은 호출자(UI)의 몫이다.
    """

    return PageWindow(
        page=request.page,
        page_size=request.page_size,
        total_items=total_items,
        total_pages=count_pages(total_items, request.page_size),
        items=items,
    )
