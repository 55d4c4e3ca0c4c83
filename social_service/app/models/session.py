from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class Session(BaseModel):
    """로그인 세션 도메인 모델.

    - token 은 쿠키(session)로만 클라이언트에 노출된다.
    - 한 번 만들어진 세션은 수정하지 않는다. 갱신이 필요하면 새 세션을 만든다.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    user_id: str
    username: str
    expires_at: datetime

    @field_validator("token", "user_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
