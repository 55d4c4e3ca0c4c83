from __future__ import annotations

from pydantic import Field

from ...models.notification import Notification
from .common import CamelModel


class NotificationResponse(CamelModel):
    id: str
    type: str
    post_id: str = Field(alias="postId")
    liked_by: str = Field(alias="likedBy")

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id or "",
            type=notification.type.value,
            post_id=notification.post_id,
            liked_by=notification.liked_by,
        )
