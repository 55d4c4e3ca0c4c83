from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import UserNotFoundError
from ..models.identity import AuthenticatedUser
from ..models.post import Post
from ..repositories.interfaces import PostRepositoryInterface, UserRepositoryInterface
from ..repositories.post_repository import PostRepository
from .profile_service import get_user_repository


class PostsService:
    """포스트 작성 및 내 포스트/좋아요한 포스트 조회."""

    def __init__(
        self,
        post_repo: PostRepositoryInterface,
        user_repo: UserRepositoryInterface,
    ) -> None:
        self._post_repo = post_repo
        self._user_repo = user_repo

    def create_post(self, identity: AuthenticatedUser, content: str) -> Post:
        """포스트를 저장하고 작성자의 posts 집합에 추가한다.

        두 쓰기는 트랜잭션으로 묶여 있지 않다. 두 번째 쓰기가 실패하면 포스트만 남는다.
        """

        now = datetime.now(timezone.utc)
        post = self._post_repo.insert(
            Post(
                content=content,
                author=identity.user_id,
                likes_count=0,
                created_at=now,
                updated_at=now,
            )
        )
        assert post.id is not None
        self._user_repo.add_post(identity.user_id, post.id)
        return post

    def list_my_posts(self, identity: AuthenticatedUser) -> list[Post]:
        return self._post_repo.list_by_author(identity.user_id)

    def list_liked_posts(self, identity: AuthenticatedUser) -> list[Post]:
        user = self._user_repo.find_by_id(identity.user_id)
        if user is None:
            raise UserNotFoundError()
        return self._post_repo.list_by_ids(user.liked_posts)


def get_post_repository(
    db: Database = Depends(get_database),
) -> PostRepositoryInterface:
    """FastAPI DI용 PostRepository 팩토리."""

    return PostRepository(db)


def get_posts_service(
    post_repo: PostRepositoryInterface = Depends(get_post_repository),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> PostsService:
    return PostsService(post_repo=post_repo, user_repo=user_repo)
