from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone

from fastapi import Depends

from ..exceptions import (
    BadRequestError,
    InvalidCredentialsError,
    UnauthenticatedError,
    UserAlreadyExistsError,
)
from ..models.session import Session
from ..models.user import User
from ..repositories.interfaces import SessionStoreInterface, UserRepositoryInterface
from ..repositories.session_store import get_session_store
from .profile_service import get_user_repository


logger = logging.getLogger(__name__)


class AuthService:
    """로그인/가입/로그아웃으로 세션을 발급하고 폐기하는 서비스.

    - 유저 조회는 UserRepositoryInterface, 세션 관리는 SessionStoreInterface 에만 의존한다.
    - 존재하지 않는 유저와 틀린 비밀번호는 같은 InvalidCredentialsError 로 응답해
      유저 이름의 존재 여부를 드러내지 않는다.
    """

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        session_store: SessionStoreInterface,
    ) -> None:
        self._user_repo = user_repo
        self._sessions = session_store

    def sign_in(self, username: str, password: str) -> Session:
        user = self._user_repo.find_by_name(username)
        if user is None or not _password_matches(user.password, password):
            logger.warning("sign-in rejected")
            raise InvalidCredentialsError()

        assert user.id is not None
        session = self._sessions.create(username=user.name, user_id=user.id)
        logger.info("user signed in", extra={"user_id": user.id})
        return session

    def sign_up(self, name: str, password: str, avatar: str = "") -> Session:
        """프로필을 만들고 바로 로그인 세션을 발급한다.

        - 이름 중복은 먼저 조회로 확인하고, 동시 가입 경쟁은 users.uniq_name 인덱스가 막는다.
          (insert 단계의 DuplicateKeyError 는 repository 에서 UserAlreadyExistsError 로 바뀐다)
        """

        if self._user_repo.find_by_name(name) is not None:
            raise UserAlreadyExistsError()

        now = datetime.now(timezone.utc)
        created = self._user_repo.insert(
            User(
                name=name,
                password=password,
                avatar=avatar,
                created_at=now,
                updated_at=now,
            )
        )

        assert created.id is not None
        session = self._sessions.create(username=created.name, user_id=created.id)
        logger.info("user signed up", extra={"user_id": created.id})
        return session

    def logout(self, token: str | None) -> None:
        """세션을 폐기한다. 이미 없는 세션이어도 에러가 아니다."""

        if token is None:
            raise UnauthenticatedError()
        if not token.strip():
            raise BadRequestError("Invalid session cookie")

        session = self._sessions.resolve(token)
        self._sessions.invalidate(token)
        if session is not None:
            logger.info("user logged out", extra={"user_id": session.user_id})


def _password_matches(stored: str, given: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), given.encode("utf-8"))


def get_auth_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    session_store: SessionStoreInterface = Depends(get_session_store),
) -> AuthService:
    """FastAPI DI용 AuthService 팩토리."""

    return AuthService(user_repo=user_repo, session_store=session_store)
