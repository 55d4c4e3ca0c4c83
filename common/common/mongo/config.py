from __future__ import annotations

import os
from urllib.parse import quote_plus


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"
MONGO_TIMEOUT_MS_ENV = "MONGO_TIMEOUT_MS"

# docker-compose 의 mongo 이미지가 사용하는 변수들. MONGO_URI 가 없을 때 URI 를 조립한다.
MONGO_HOST_ENV = "MONGO_HOST"
MONGO_PORT_ENV = "MONGO_PORT"
MONGO_USERNAME_ENV = "MONGO_INITDB_ROOT_USERNAME"
MONGO_PASSWORD_ENV = "MONGO_INITDB_ROOT_PASSWORD"

DEFAULT_MONGO_DB_NAME = "social-network"
DEFAULT_MONGO_PORT = 27017
DEFAULT_MONGO_TIMEOUT_MS = 5000


def get_mongo_uri() -> str:
    """MongoDB 연결에 사용할 URI를 반환한다.

    - MONGO_URI 가 설정되어 있으면 그대로 사용한다.
    - 없으면 MONGO_HOST / MONGO_PORT / MONGO_INITDB_ROOT_* 로 URI 를 조립한다.
    - 둘 다 없으면 애플리케이션이 즉시 실패하도록 RuntimeError를 발생시킨다.
    """

    value = os.getenv(MONGO_URI_ENV)
    if value:
        return value

    host = os.getenv(MONGO_HOST_ENV, "").strip()
    if not host:
        raise RuntimeError(
            f"{MONGO_URI_ENV} or {MONGO_HOST_ENV} environment variable is required for MongoDB",
        )

    raw_port = os.getenv(MONGO_PORT_ENV, "").strip() or str(DEFAULT_MONGO_PORT)
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise RuntimeError(f"invalid {MONGO_PORT_ENV}: {raw_port!r}") from exc

    username = os.getenv(MONGO_USERNAME_ENV, "")
    password = os.getenv(MONGO_PASSWORD_ENV, "")
    if username:
        credentials = f"{quote_plus(username)}:{quote_plus(password)}@"
    else:
        credentials = ""

    return f"mongodb://{credentials}{host}:{port}"


def get_mongo_db_name() -> str | None:
    """MongoDB에서 사용할 기본 데이터베이스 이름을 반환한다.

    - MONGO_DB_NAME 이 설정되어 있으면 해당 값을 사용한다.
    - 설정되어 있지 않으면 None 을 반환하고, 클라이언트는 URI의 기본 DB를 사용한다.
    """

    value = os.getenv(MONGO_DB_NAME_ENV, "").strip()
    return value or None


def get_mongo_timeout_ms() -> int:
    """모든 Mongo 호출에 적용할 클라이언트 측 타임아웃(ms)."""

    raw = os.getenv(MONGO_TIMEOUT_MS_ENV, "").strip()
    if not raw:
        return DEFAULT_MONGO_TIMEOUT_MS
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"invalid {MONGO_TIMEOUT_MS_ENV}: {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{MONGO_TIMEOUT_MS_ENV} must be positive: {value}")
    return value
