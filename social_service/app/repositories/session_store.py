from __future__ import annotations

import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..config import load_session_config
from ..models.session import Session


logger = logging.getLogger(__name__)


# 16 bytes = 128 bit, hex 인코딩 시 32자
SESSION_TOKEN_BYTES = 16


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_token() -> str:
    """추측 불가능한 세션 토큰을 만든다. 엔트로피 소스 실패는 그대로 전파된다."""

    return secrets.token_hex(SESSION_TOKEN_BYTES)


class SessionStore:
    """프로세스 전역 로그인 세션 저장소.

    - token -> Session 매핑을 메모리에 보관한다. (수평 확장은 고려하지 않는다)
    - 모든 요청 스레드가 동시에 접근하므로 읽기/쓰기 모두 하나의 Lock 아래에서 수행한다.
    - 만료된 세션은 별도 스케줄러 없이 resolve 시점에 지연 삭제한다.
    """

    def __init__(
        self,
        ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
        token_factory: Callable[[], str] = generate_session_token,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("session ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._token_factory = token_factory
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, username: str, user_id: str) -> Session:
        token = self._token_factory()
        session = Session(
            token=token,
            user_id=user_id,
            username=username,
            expires_at=self._clock() + self._ttl,
        )
        with self._lock:
            self._sessions[token] = session
        return session

    def resolve(self, token: str) -> Session | None:
        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.is_expired(now):
                del self._sessions[token]
                logger.debug(
                    "expired session evicted", extra={"user_id": session.user_id}
                )
                return None
            return session

    def invalidate(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def __contains__(self, token: object) -> bool:
        # 만료 여부와 상관없이 엔트리가 남아 있는지만 본다.
        with self._lock:
            return token in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_store: Optional[SessionStore] = None
_store_lock = threading.Lock()


def get_session_store() -> SessionStore:
    """전역 SessionStore 싱글톤을 반환한다. (FastAPI DI 용)"""

    global _store

    if _store is not None:
        return _store

    with _store_lock:
        if _store is None:
            config = load_session_config()
            _store = SessionStore(ttl=timedelta(seconds=config.ttl_seconds))
        return _store
