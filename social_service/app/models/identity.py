from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AuthenticatedUser(BaseModel):
    """인증 게이트가 만들어 보호된 API 에 명시적으로 넘겨주는 신원 정보.

    권한(role) 정보는 담지 않는다. 누구인지만 확인한다.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
