from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..models.identity import AuthenticatedUser
from ..models.notification import Notification
from ..repositories.interfaces import NotificationRepositoryInterface
from ..repositories.notification_repository import NotificationRepository


class NotificationsService:
    def __init__(self, repo: NotificationRepositoryInterface) -> None:
        self._repo = repo

    def list_notifications(self, identity: AuthenticatedUser) -> list[Notification]:
        """내가 누른 좋아요로 생성된 알림 목록 (likedBy == 나)."""

        return self._repo.list_by_liked_by(identity.user_id)


def get_notification_repository(
    db: Database = Depends(get_database),
) -> NotificationRepositoryInterface:
    """FastAPI DI용 NotificationRepository 팩토리."""

    return NotificationRepository(db)


def get_notifications_service(
    repo: NotificationRepositoryInterface = Depends(get_notification_repository),
) -> NotificationsService:
    return NotificationsService(repo)
