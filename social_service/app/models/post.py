from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Post(BaseModel):
    """포스트 도메인 모델.

    likes_count 는 시스템이 조용할 때 likedPosts 에 이 포스트를 가진 유저 수와 같아야 한다.
    """

    id: str | None = None
    content: str
    author: str
    likes_count: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime
