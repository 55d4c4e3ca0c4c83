from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId

from social_service.app.models.notification import Notification, NotificationType
from social_service.app.models.user import User
from social_service.app.repositories.documents.notification_document import (
    NotificationDocument,
)
from social_service.app.repositories.documents.user_document import UserDocument


NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def test_user_record_uses_object_ids_and_camel_case():
    post_id = ObjectId()
    user = User(
        name="alice",
        password="pw",
        posts=[str(post_id)],
        liked_posts=[str(post_id)],
        created_at=NOW,
        updated_at=NOW,
    )

    record = UserDocument.from_domain(user).to_mongo_record()

    # _id 는 Mongo 가 생성하도록 비워 둔다.
    assert "_id" not in record
    assert record["likedPosts"] == [post_id]
    assert record["posts"] == [post_id]
    assert "liked_posts" not in record


def test_user_document_to_domain_uses_string_ids():
    user_id = ObjectId()
    post_id = ObjectId()
    naive = datetime(2024, 5, 1, 9, 30)

    user = UserDocument.model_validate(
        {
            "_id": user_id,
            "name": "alice",
            "password": "pw",
            "likedPosts": [post_id],
            "created_at": naive,
            "updated_at": naive,
        }
    ).to_domain()

    assert user.id == str(user_id)
    assert user.liked_posts == [str(post_id)]
    assert user.avatar == ""
    assert user.created_at.tzinfo is timezone.utc


def test_notification_type_is_stored_as_plain_string():
    notification = Notification(
        post_id=str(ObjectId()),
        liked_by=str(ObjectId()),
        created_at=NOW,
        updated_at=NOW,
    )

    record = NotificationDocument.from_domain(notification).to_mongo_record()

    assert record["type"] == "like"
    assert type(record["type"]) is str
    assert isinstance(record["postId"], ObjectId)
    assert isinstance(record["likedBy"], ObjectId)

    restored = NotificationDocument.model_validate(
        {**record, "_id": ObjectId()}
    ).to_domain()
    assert restored.type is NotificationType.LIKE
    assert restored.post_id == notification.post_id
