from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class NotificationType(str, Enum):
    LIKE = "like"


class Notification(BaseModel):
    """좋아요 한 번당 정확히 한 번 만들어지는 알림. 생성 후 수정/삭제하지 않는다."""

    id: str | None = None
    type: NotificationType = NotificationType.LIKE
    post_id: str
    liked_by: str
    created_at: datetime
    updated_at: datetime
