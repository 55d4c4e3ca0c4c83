"""좋아요 워크플로우.

"유저 U 가 포스트 P 에 좋아요" 라는 하나의 동작을 세 컬렉션에 대한 네 번의 독립적인 쓰기로 수행한다.
MongoDB 멀티 도큐먼트 트랜잭션은 사용하지 않는다.

1. 가드: U.likedPosts 에 P 가 있으면 AlreadyLikedError (쓰기 없음)
2. notifications 에 알림 insert
3. posts.likesCount $inc 1
4. users.likedPosts $addToSet P
5. users.notifications $addToSet 알림 ID

2~5 는 순서대로 실행하고 실패 시 롤백/재시도하지 않는다. 3 이후 단계가 실패하면
LikePartiallyAppliedError 로 어느 단계까지 반영되었는지 알린다. 4, 5 는 add-to-set 이라
재실행해도 안전하고, likesCount 는 reconcile_likes_count 로 likedPosts 기준 재계산할 수 있다.

같은 (U, P) 에 대한 동시 요청은 둘 다 가드를 통과할 수 있다. 늦은 쪽은 4 의 $addToSet 이
아무것도 바꾸지 않으므로 그 시점에 부분 실패로 끊기고, 이미 올라간 likesCount 는 reconcile 로 맞춘다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends
from pymongo.errors import PyMongoError

from common.mongo.types import is_object_id, to_object_id

from ..exceptions import (
    AlreadyLikedError,
    BadRequestError,
    LikePartiallyAppliedError,
    LikesCountChangedError,
    LikeStep,
    PostNotFoundError,
    SocialServiceError,
    UserNotFoundError,
)
from ..models.identity import AuthenticatedUser
from ..models.notification import Notification, NotificationType
from ..models.post import Post
from ..repositories.interfaces import (
    NotificationRepositoryInterface,
    PostRepositoryInterface,
    UserRepositoryInterface,
)
from .notifications_service import get_notification_repository
from .posts_service import get_post_repository
from .profile_service import get_user_repository


logger = logging.getLogger(__name__)


class LikesService:
    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        post_repo: PostRepositoryInterface,
        notification_repo: NotificationRepositoryInterface,
    ) -> None:
        self._user_repo = user_repo
        self._post_repo = post_repo
        self._notification_repo = notification_repo

    def like_post(self, identity: AuthenticatedUser, post_id: str) -> Notification:
        """포스트에 좋아요를 누르고 생성된 알림을 반환한다."""

        post_id = _normalize_post_id(post_id)
        user_id = identity.user_id

        # 1. 가드: 어떤 쓰기보다 먼저 수행한다.
        user = self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        if post_id in user.liked_posts:
            raise AlreadyLikedError()
        if self._post_repo.find_by_id(post_id) is None:
            raise PostNotFoundError()

        # 2. 알림 생성. 실패하면 아무것도 반영되지 않았으므로 에러를 그대로 올린다.
        now = datetime.now(timezone.utc)
        notification = self._notification_repo.insert(
            Notification(
                type=NotificationType.LIKE,
                post_id=post_id,
                liked_by=user_id,
                created_at=now,
                updated_at=now,
            )
        )
        assert notification.id is not None
        notification_id = notification.id

        def increment_likes_count() -> None:
            if not self._post_repo.increment_likes_count(post_id):
                # 가드 이후 포스트가 사라진 경우
                raise PostNotFoundError()

        def add_liked_post() -> None:
            # 이미 들어 있으면 같은 (U, P) 요청이 가드를 동시에 통과한 것이다.
            if not self._user_repo.add_liked_post(user_id, post_id):
                raise AlreadyLikedError()

        steps: list[tuple[LikeStep, Callable[[], object]]] = [
            (LikeStep.INCREMENT_LIKES_COUNT, increment_likes_count),
            (LikeStep.ADD_LIKED_POST, add_liked_post),
            (
                LikeStep.ADD_USER_NOTIFICATION,
                lambda: self._user_repo.add_notification(user_id, notification_id),
            ),
        ]

        applied = [LikeStep.CREATE_NOTIFICATION]
        for step, apply in steps:
            try:
                apply()
            except (PyMongoError, SocialServiceError) as exc:
                logger.error(
                    "like partially applied: %s",
                    exc,
                    extra={
                        "user_id": user_id,
                        "post_id": post_id,
                        "notification_id": notification_id,
                        "step": step.value,
                    },
                )
                raise LikePartiallyAppliedError(
                    post_id=post_id,
                    notification_id=notification_id,
                    applied_steps=list(applied),
                    failed_step=step,
                ) from exc
            applied.append(step)

        logger.info(
            "post liked",
            extra={
                "user_id": user_id,
                "post_id": post_id,
                "notification_id": notification_id,
            },
        )
        return notification

    def reconcile_likes_count(self, post_id: str) -> Post:
        """likesCount 를 likedPosts 에 이 포스트를 가진 유저 수로 다시 맞춘다.

        부분 실패로 카운터가 어긋났을 때 복구용으로 사용한다. 여러 번 실행해도 결과가 같다.

        - 쓰기는 읽었던 likesCount 가 그대로일 때만 반영된다. 그 사이 $inc 가 끼어들면
          LikesCountChangedError 로 거절하고 재시도는 호출자에게 맡긴다.
        - $inc 는 끝났지만 likedPosts 반영 전인 좋아요가 진행 중이면 그 좋아요를 빼고 센다.
          정확한 결과가 필요하면 해당 포스트에 좋아요가 들어오지 않는 동안 실행한다.
        """

        post_id = _normalize_post_id(post_id)
        post = self._post_repo.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError()

        actual = self._user_repo.count_by_liked_post(post_id)
        if actual == post.likes_count:
            return post

        logger.warning(
            "likesCount drift found: %d -> %d",
            post.likes_count,
            actual,
            extra={"post_id": post_id},
        )
        updated = self._post_repo.set_likes_count(
            post_id, actual, expected=post.likes_count
        )
        if updated is not None:
            return updated

        if self._post_repo.find_by_id(post_id) is None:
            raise PostNotFoundError()
        raise LikesCountChangedError()


def _normalize_post_id(post_id: str) -> str:
    """ObjectId 로 해석되는 값만 받고, 저장된 값과 같은 소문자 hex 로 맞춘다."""

    if not is_object_id(post_id):
        raise BadRequestError("Invalid post ID")
    return str(to_object_id(post_id))


def get_likes_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    post_repo: PostRepositoryInterface = Depends(get_post_repository),
    notification_repo: NotificationRepositoryInterface = Depends(
        get_notification_repository
    ),
) -> LikesService:
    """FastAPI DI용 LikesService 팩토리."""

    return LikesService(
        user_repo=user_repo,
        post_repo=post_repo,
        notification_repo=notification_repo,
    )
