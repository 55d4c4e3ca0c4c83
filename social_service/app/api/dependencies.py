"""Shared API dependencies: the session-cookie authentication gate."""

from __future__ import annotations

from datetime import timezone
from typing import Annotated

from fastapi import Cookie, Depends, Request, Response

from ..config import SESSION_COOKIE_NAME
from ..exceptions import UnauthenticatedError
from ..models.identity import AuthenticatedUser
from ..models.session import Session
from ..repositories.interfaces import SessionStoreInterface
from ..repositories.session_store import get_session_store


SessionCookie = Annotated[str | None, Cookie(alias=SESSION_COOKIE_NAME)]


def get_current_user(
    request: Request,
    session_token: SessionCookie = None,
    store: SessionStoreInterface = Depends(get_session_store),
) -> AuthenticatedUser:
    """Resolve the session cookie into the caller's identity.

    Missing cookie, unknown token and expired token all raise the same
    UnauthenticatedError, so the response never reveals whether a token was
    ever valid. No role/permission checks happen here.
    """

    if not session_token:
        raise UnauthenticatedError()

    session = store.resolve(session_token)
    if session is None:
        raise UnauthenticatedError()

    # RequestTraceMiddleware 가 완료 로그에 user_id 를 함께 남긴다.
    request.state.user_id = session.user_id
    return AuthenticatedUser(user_id=session.user_id, username=session.username)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def set_session_cookie(response: Response, session: Session) -> None:
    """세션 쿠키의 만료 시각은 세션 만료 시각과 동일하게 맞춘다."""

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.token,
        expires=session.expires_at.astimezone(timezone.utc),
        httponly=True,
    )


def clear_session_cookie(response: Response) -> None:
    # 빈 값 + 이미 지난 만료 시각으로 덮어써 브라우저가 쿠키를 지우게 한다.
    response.delete_cookie(key=SESSION_COOKIE_NAME, httponly=True)
