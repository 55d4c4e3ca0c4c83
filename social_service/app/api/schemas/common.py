"""공통 스키마 정의."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MessageResponse(BaseModel):
    message: str


class CamelModel(BaseModel):
    """응답 JSON 키를 기존 클라이언트와 같은 camelCase(likesCount 등)로 내보내는 베이스 모델.

    필드는 snake_case 로 선언하고 alias 로 camelCase 를 지정한다.
    FastAPI 는 response_model 을 by_alias=True 로 직렬화한다.
    """

    model_config = ConfigDict(populate_by_name=True)
