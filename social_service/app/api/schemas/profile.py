from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ...models.user import User
from .common import CamelModel


class CreateProfileRequest(BaseModel):
    name: str
    password: str
    avatar: str = ""

    @field_validator("name", "password")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    avatar: str | None = None


class ProfileResponse(CamelModel):
    """내 프로필 응답. 비밀번호는 절대 내보내지 않는다."""

    id: str
    name: str
    avatar: str
    posts: list[str]
    liked_posts: list[str] = Field(alias="likedPosts")
    notifications: list[str]

    @classmethod
    def from_domain(cls, user: User) -> "ProfileResponse":
        return cls(
            id=user.id or "",
            name=user.name,
            avatar=user.avatar,
            posts=user.posts,
            liked_posts=user.liked_posts,
            notifications=user.notifications,
        )
