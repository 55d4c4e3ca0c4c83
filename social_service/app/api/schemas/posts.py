from __future__ import annotations

from pydantic import BaseModel, Field

from ...models.post import Post
from .common import CamelModel


class CreatePostRequest(BaseModel):
    content: str


class PostResponse(CamelModel):
    id: str
    content: str
    author: str
    likes_count: int = Field(alias="likesCount")

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id or "",
            content=post.content,
            author=post.author,
            likes_count=post.likes_count,
        )
