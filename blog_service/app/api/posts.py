from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from common.models.post import PostFields
from common.models.user import Identity

from ..config import AppConfig, get_app_config
from ..services.posts_service import PostsService, get_posts_service
from ..storage.covers import CoverUpload
from .deps import get_current_identity
from .schemas.posts import DeletePostResponse, ListPostsResponse, PostResponse


router = APIRouter()


def _to_cover(file: Optional[UploadFile]) -> CoverUpload | None:
    # 파일을 고르지 않은 폼은 filename 이 빈 파트를 보내기도 한다.
    if file is None or not file.filename:
        return None
    return CoverUpload(
        filename=file.filename,
        content_type=file.content_type,
        stream=file.file,
    )


@router.post(
    "",
    response_model=PostResponse,
    summary="포스트 작성",
    description="multipart 폼(title, summary, content, file?)으로 새 포스트를 만든다.",
)
def create_post(
    title: str = Form(""),
    summary: str = Form(""),
    content: str = Form(""),
    file: Optional[UploadFile] = File(default=None),
    identity: Identity = Depends(get_current_identity),
    service: PostsService = Depends(get_posts_service),
) -> PostResponse:
    fields = PostFields(title=title, summary=summary, content=content)
    post = service.create_post(identity, fields, _to_cover(file))
    return PostResponse.from_domain(post)


@router.put(
    "",
    response_model=PostResponse,
    summary="포스트 수정 (작성자 전용)",
    description="file 이 없으면 기존 커버 이미지를 유지한다.",
)
def update_post(
    id: str = Form(""),
    title: str = Form(""),
    summary: str = Form(""),
    content: str = Form(""),
    file: Optional[UploadFile] = File(default=None),
    identity: Identity = Depends(get_current_identity),
    service: PostsService = Depends(get_posts_service),
) -> PostResponse:
    fields = PostFields(title=title, summary=summary, content=content)
    post = service.update_post(id, identity, fields, _to_cover(file))
    return PostResponse.from_domain(post)


@router.get(
    "",
    response_model=ListPostsResponse,
    summary="포스트 목록 조회",
    description=(
        "최신순으로 정렬된 포스트를 페이지네이션하여 반환한다. "
        "limit 은 설정된 최대값으로 잘린다."
    ),
)
def list_posts(
    page: int = Query(1, ge=1, description="조회할 페이지 (1부터 시작)"),
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        description="페이지당 아이템 개수",
    ),
    service: PostsService = Depends(get_posts_service),
    config: AppConfig = Depends(get_app_config),
) -> ListPostsResponse:
    page_size = limit or config.pagination.default_page_size
    page_size = min(page_size, config.pagination.max_page_size)
    window = service.list_page(page, page_size)
    return ListPostsResponse.from_window(window)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="단일 포스트 조회",
)
def get_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> PostResponse:
    return PostResponse.from_domain(service.get_post(post_id))


@router.delete(
    "/{post_id}",
    response_model=DeletePostResponse,
    summary="포스트 삭제 (작성자 전용)",
)
def delete_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    service: PostsService = Depends(get_posts_service),
) -> DeletePostResponse:
    service.delete_post(post_id, identity)
    return DeletePostResponse(success=True)
