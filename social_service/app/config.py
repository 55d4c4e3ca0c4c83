from __future__ import annotations

import os
from dataclasses import dataclass


SOCIAL_SERVICE_PORT_ENV = "SOCIAL_SERVICE_PORT"
SESSION_TTL_SECONDS_ENV = "SESSION_TTL_SECONDS"

DEFAULT_PORT = 8000

# 로그인 세션 유효 시간 (10시간). 쿠키 만료 시각과 세션 만료 시각은 항상 같다.
DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 10

SESSION_COOKIE_NAME = "session"


@dataclass(slots=True)
class SessionConfig:
    ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS


@dataclass(slots=True)
class AppConfig:
    """social-service 전체 설정 루트.

    - Mongo 관련 설정은 common.mongo.config 에서 따로 읽는다.
    """

    port: int
    session: SessionConfig


def _read_positive_int(env_name: str, default: int) -> int:
    raw = os.getenv(env_name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:  # noqa: TRY003
        raise RuntimeError(f"invalid {env_name}: {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{env_name} must be positive: {value}")
    return value


def load_session_config() -> SessionConfig:
    ttl_seconds = _read_positive_int(
        SESSION_TTL_SECONDS_ENV, DEFAULT_SESSION_TTL_SECONDS
    )
    return SessionConfig(ttl_seconds=ttl_seconds)


def load_config() -> AppConfig:
    """social-service 설정을 환경 변수에서 로드하여 AppConfig 로 반환한다."""

    return AppConfig(
        port=_read_positive_int(SOCIAL_SERVICE_PORT_ENV, DEFAULT_PORT),
        session=load_session_config(),
    )
