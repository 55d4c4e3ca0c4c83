from __future__ import annotations

from pydantic import Field

from common.mongo.types import BaseDocument, PyObjectId, from_object_id
from ...models.notification import Notification, NotificationType


class NotificationDocument(BaseDocument):
    """MongoDB notifications 컬렉션 도큐먼트 모델."""

    type: str
    post_id: PyObjectId = Field(alias="postId")
    liked_by: PyObjectId = Field(alias="likedBy")

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationDocument":
        return cls.model_validate(
            {
                "_id": notification.id,
                "type": notification.type.value,
                "postId": notification.post_id,
                "likedBy": notification.liked_by,
                "created_at": notification.created_at,
                "updated_at": notification.updated_at,
            }
        )

    def to_domain(self) -> Notification:
        return Notification(
            id=from_object_id(self.id),
            type=NotificationType(self.type),
            post_id=str(self.post_id),
            liked_by=str(self.liked_by),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
