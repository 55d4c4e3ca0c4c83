from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import CurrentUser
from ..schemas.notifications import NotificationResponse
from ..schemas.posts import CreatePostRequest, PostResponse
from ...services.likes_service import LikesService, get_likes_service
from ...services.posts_service import PostsService, get_posts_service


router = APIRouter()


@router.post("", response_model=PostResponse, summary="포스트 작성")
def create_post(
    body: CreatePostRequest,
    identity: CurrentUser,
    service: PostsService = Depends(get_posts_service),
) -> PostResponse:
    post = service.create_post(identity, content=body.content)
    return PostResponse.from_domain(post)


@router.get("", response_model=list[PostResponse], summary="내가 쓴 포스트 목록")
def list_my_posts(
    identity: CurrentUser,
    service: PostsService = Depends(get_posts_service),
) -> list[PostResponse]:
    return [PostResponse.from_domain(p) for p in service.list_my_posts(identity)]


# "/liked" 는 "/{post_id}/..." 보다 먼저 등록한다.
@router.get(
    "/liked",
    response_model=list[PostResponse],
    summary="내가 좋아요한 포스트 목록",
)
def list_liked_posts(
    identity: CurrentUser,
    service: PostsService = Depends(get_posts_service),
) -> list[PostResponse]:
    return [PostResponse.from_domain(p) for p in service.list_liked_posts(identity)]


@router.post(
    "/{post_id}/like",
    response_model=NotificationResponse,
    summary="포스트 좋아요",
    description=(
        "유저당 한 번만 좋아요할 수 있다. 이미 좋아요한 포스트면 409 를 반환하고 "
        "아무것도 기록하지 않는다."
    ),
)
def like_post(
    post_id: str,
    identity: CurrentUser,
    service: LikesService = Depends(get_likes_service),
) -> NotificationResponse:
    notification = service.like_post(identity, post_id)
    return NotificationResponse.from_domain(notification)


@router.post(
    "/{post_id}/likes/reconcile",
    response_model=PostResponse,
    summary="likesCount 재계산 (운영용)",
    description="부분 실패로 어긋난 likesCount 를 likedPosts 기준으로 다시 맞춘다.",
)
def reconcile_likes_count(
    post_id: str,
    identity: CurrentUser,
    service: LikesService = Depends(get_likes_service),
) -> PostResponse:
    post = service.reconcile_likes_count(post_id)
    return PostResponse.from_domain(post)
