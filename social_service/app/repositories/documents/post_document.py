from __future__ import annotations

from pydantic import Field

from common.mongo.types import BaseDocument, PyObjectId, from_object_id
from ...models.post import Post


class PostDocument(BaseDocument):
    """MongoDB posts 컬렉션 도큐먼트 모델."""

    content: str
    author: PyObjectId
    # 예전 도큐먼트에 필드가 없을 수 있으므로 0 을 기본값으로 둔다.
    likes_count: int = Field(default=0, alias="likesCount")

    @classmethod
    def from_domain(cls, post: Post) -> "PostDocument":
        data = post.model_dump()
        data["_id"] = data.pop("id", None)
        data["likesCount"] = data.pop("likes_count")
        return cls.model_validate(data)

    def to_domain(self) -> Post:
        return Post(
            id=from_object_id(self.id),
            content=self.content,
            author=str(self.author),
            likes_count=max(self.likes_count, 0),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
