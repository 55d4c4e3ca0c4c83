from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """유저 도메인 모델.

    - Mongo users 컬렉션과 1:1로 매핑된다.
    - name 은 유니크하다. (users.uniq_name 인덱스)
    - posts / liked_posts / notifications 는 집합으로 다루며 중복을 허용하지 않는다.
    """

    id: str | None = None
    name: str
    password: str
    avatar: str = ""
    posts: list[str] = Field(default_factory=list)
    liked_posts: list[str] = Field(default_factory=list)
    notifications: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class UserProfileUpdate(BaseModel):
    """프로필 수정 입력. 비어 있는 값은 수정하지 않는다."""

    name: str | None = None
    avatar: str | None = None

    def to_fields(self) -> dict[str, str]:
        fields: dict[str, str] = {}
        if self.name:
            fields["name"] = self.name
        if self.avatar:
            fields["avatar"] = self.avatar
        return fields
