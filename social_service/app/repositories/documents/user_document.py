from __future__ import annotations

from pydantic import Field

from common.mongo.types import (
    BaseDocument,
    PyObjectId,
    from_object_id,
    from_object_ids,
)
from ...models.user import User


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델.

    필드 이름은 기존 데이터와 호환되도록 camelCase(likedPosts) 를 유지한다.
    """

    name: str
    password: str
    avatar: str = ""
    posts: list[PyObjectId] = Field(default_factory=list)
    liked_posts: list[PyObjectId] = Field(default_factory=list, alias="likedPosts")
    notifications: list[PyObjectId] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        return cls.model_validate(
            {
                "_id": user.id,
                "name": user.name,
                "password": user.password,
                "avatar": user.avatar,
                "posts": user.posts,
                "likedPosts": user.liked_posts,
                "notifications": user.notifications,
                "created_at": user.created_at,
                "updated_at": user.updated_at,
            }
        )

    def to_domain(self) -> User:
        return User(
            id=from_object_id(self.id),
            name=self.name,
            password=self.password,
            avatar=self.avatar,
            posts=from_object_ids(self.posts),
            liked_posts=from_object_ids(self.liked_posts),
            notifications=from_object_ids(self.notifications),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
