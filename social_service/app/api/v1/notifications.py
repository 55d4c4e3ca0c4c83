from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import CurrentUser
from ..schemas.notifications import NotificationResponse
from ...services.notifications_service import (
    NotificationsService,
    get_notifications_service,
)


router = APIRouter()


@router.get(
    "",
    response_model=list[NotificationResponse],
    summary="내 좋아요 알림 목록",
)
def list_notifications(
    identity: CurrentUser,
    service: NotificationsService = Depends(get_notifications_service),
) -> list[NotificationResponse]:
    return [
        NotificationResponse.from_domain(n)
        for n in service.list_notifications(identity)
    ]
