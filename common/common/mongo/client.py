from __future__ import annotations

import logging
import threading
from typing import Optional, cast

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from .config import (
    DEFAULT_MONGO_DB_NAME,
    get_mongo_db_name,
    get_mongo_timeout_ms,
    get_mongo_uri,
)


logger = logging.getLogger(__name__)


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI (또는 MONGO_HOST 등) 에서 URI 를 읽어온다.
    - 모든 호출은 MONGO_TIMEOUT_MS 안에 끝나야 하며, 초과 시 드라이버가 타임아웃 에러를 던진다.
    - ping 으로 연결을 검증한다.
    - users / posts / notifications 컬렉션에 필요한 인덱스를 한 번만 생성한다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        uri = get_mongo_uri()
        timeout_ms = get_mongo_timeout_ms()
        client = MongoClient(
            uri,
            timeoutMS=timeout_ms,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
        )

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

        # 사용할 DB 이름 결정: MONGO_DB_NAME > URI 기본 DB > social-network
        db_name = get_mongo_db_name()
        if db_name:
            db = client[db_name]
        else:
            db = client.get_default_database(default=DEFAULT_MONGO_DB_NAME)

        _client = client
        _db = db

        try:
            _ensure_indexes(_db)
        except Exception as exc:  # noqa: BLE001
            # 인덱스 생성 실패는 치명적 오류로 간주한다.
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            raise

        safe_db = cast(Database, _db)
        logger.info("MongoDB connected and indexes ensured (db=%s)", safe_db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    global _db

    if _db is None:
        get_client()
    assert (
        _db is not None
    )  # get_client 에서 _db 를 초기화하지 못했다면 예외가 이미 발생했어야 한다.
    return _db


def close_client() -> None:
    """애플리케이션 종료 시 커넥션 풀을 정리한다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None


def _ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다.

    중복 생성해도 MongoDB 가 처리하므로 idempotent 하다.
    """

    users = db["users"]

    # 이름 중복 가입은 check-then-insert 만으로 막을 수 없으므로 유니크 인덱스가 최종 방어선이다.
    users.create_index(
        [("name", ASCENDING)],
        name="uniq_name",
        unique=True,
    )

    # likesCount 재계산 시 likedPosts 를 기준으로 유저 수를 센다.
    users.create_index(
        [("likedPosts", ASCENDING)],
        name="idx_liked_posts",
    )

    posts = db["posts"]

    posts.create_index(
        [("author", ASCENDING), ("_id", ASCENDING)],
        name="idx_author_id",
    )

    notifications = db["notifications"]

    notifications.create_index(
        [("likedBy", ASCENDING), ("_id", ASCENDING)],
        name="idx_liked_by_id",
    )
