from __future__ import annotations

from datetime import datetime, timezone

from pymongo.database import Database

from common.mongo.types import to_object_id

from ..models.notification import Notification
from .documents.notification_document import NotificationDocument
from .interfaces import NotificationRepositoryInterface


class NotificationRepository(NotificationRepositoryInterface):
    """notifications 컬렉션에 대한 MongoDB 접근 레이어. 알림은 추가만 되고 수정되지 않는다."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["notifications"]

    def insert(self, notification: Notification) -> Notification:
        now = datetime.now(timezone.utc)
        notification.created_at = now
        notification.updated_at = now

        payload = NotificationDocument.from_domain(notification).to_mongo_record()
        result = self._col.insert_one(payload)
        payload["_id"] = result.inserted_id
        return NotificationDocument.model_validate(payload).to_domain()

    def list_by_liked_by(self, user_id: str) -> list[Notification]:
        cursor = self._col.find(
            {"likedBy": to_object_id(user_id)},
            sort=[("_id", 1)],
        )
        items: list[Notification] = []
        for raw in cursor:
            items.append(NotificationDocument.model_validate(raw).to_domain())
        return items
