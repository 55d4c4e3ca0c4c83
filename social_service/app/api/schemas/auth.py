from __future__ import annotations

from pydantic import BaseModel


class SignInRequest(BaseModel):
    username: str
    password: str
