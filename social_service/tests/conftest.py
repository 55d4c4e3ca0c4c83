from __future__ import annotations

import threading
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from social_service.app.config import DEFAULT_SESSION_TTL_SECONDS
from social_service.app.exceptions import UserAlreadyExistsError
from social_service.app.main import create_app
from social_service.app.models.identity import AuthenticatedUser
from social_service.app.models.notification import Notification
from social_service.app.models.post import Post
from social_service.app.models.user import User
from social_service.app.repositories.session_store import (
    SessionStore,
    get_session_store,
)
from social_service.app.services.notifications_service import (
    get_notification_repository,
)
from social_service.app.services.posts_service import get_post_repository
from social_service.app.services.profile_service import get_user_repository


def _oid(value: str) -> str:
    # Mongo 는 ObjectId 로 저장하므로 대소문자가 다른 hex 도 같은 값이다.
    return str(ObjectId(value))


class FakeClock:
    def __init__(self) -> None:
        # 세션 쿠키 만료 시각이 이 값으로 정해지므로 실제 현재 시각에서 시작해야 한다.
        self.now = datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class _FaultInjection:
    """쓰기 메서드 이름 -> 던질 예외. 부분 실패 시나리오 재현용."""

    def __init__(self) -> None:
        self.failures: dict[str, Exception] = {}
        self.writes: list[tuple] = []

    def _write(self, op: str, *args: object) -> None:
        exc = self.failures.get(op)
        if exc is not None:
            raise exc
        self.writes.append((op, *args))


class InMemoryUserRepository(_FaultInjection):
    """UserRepositoryInterface 의 메모리 구현. Mongo 의 $addToSet 의미를 그대로 따른다."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self.users: dict[str, User] = {}

    def find_by_name(self, name: str) -> User | None:
        with self._lock:
            for user in self.users.values():
                if user.name == name:
                    return user.model_copy(deep=True)
        return None

    def find_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self.users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def insert(self, user: User) -> User:
        with self._lock:
            self._write("insert", user.name)
            if any(u.name == user.name for u in self.users.values()):
                raise UserAlreadyExistsError()
            created = user.model_copy(update={"id": str(ObjectId())}, deep=True)
            self.users[created.id] = created
            return created.model_copy(deep=True)

    def update_profile(self, user_id: str, fields: dict[str, str]) -> bool:
        with self._lock:
            self._write("update_profile", user_id, fields)
            user = self.users.get(user_id)
            if user is None:
                return False
            new_name = fields.get("name")
            if new_name and any(
                u.name == new_name and uid != user_id for uid, u in self.users.items()
            ):
                raise UserAlreadyExistsError()
            self.users[user_id] = user.model_copy(update=fields)
            return True

    def _add_to_set(self, op: str, user_id: str, field: str, value: str) -> bool:
        with self._lock:
            value = _oid(value)
            self._write(op, user_id, value)
            user = self.users.get(user_id)
            if user is None:
                return False
            values: list[str] = getattr(user, field)
            if value in values:
                return False
            values.append(value)
            return True

    def add_post(self, user_id: str, post_id: str) -> None:
        self._add_to_set("add_post", user_id, "posts", post_id)

    def add_liked_post(self, user_id: str, post_id: str) -> bool:
        return self._add_to_set("add_liked_post", user_id, "liked_posts", post_id)

    def add_notification(self, user_id: str, notification_id: str) -> None:
        self._add_to_set(
            "add_notification", user_id, "notifications", notification_id
        )

    def count_by_liked_post(self, post_id: str) -> int:
        post_id = _oid(post_id)
        with self._lock:
            return sum(1 for u in self.users.values() if post_id in u.liked_posts)


class InMemoryPostRepository(_FaultInjection):
    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self.posts: dict[str, Post] = {}

    def insert(self, post: Post) -> Post:
        with self._lock:
            self._write("insert", post.author)
            created = post.model_copy(update={"id": str(ObjectId())})
            self.posts[created.id] = created
            return created.model_copy()

    def find_by_id(self, post_id: str) -> Post | None:
        with self._lock:
            post = self.posts.get(_oid(post_id))
            return post.model_copy() if post else None

    def list_by_author(self, author_id: str) -> list[Post]:
        with self._lock:
            return [p.model_copy() for p in self.posts.values() if p.author == author_id]

    def list_by_ids(self, post_ids: list[str]) -> list[Post]:
        with self._lock:
            keys = [_oid(i) for i in post_ids]
            return [self.posts[k].model_copy() for k in keys if k in self.posts]

    def increment_likes_count(self, post_id: str, amount: int = 1) -> bool:
        with self._lock:
            self._write("increment_likes_count", post_id)
            post = self.posts.get(_oid(post_id))
            if post is None:
                return False
            post.likes_count += amount
            return True

    def set_likes_count(
        self, post_id: str, likes_count: int, expected: int
    ) -> Post | None:
        with self._lock:
            self._write("set_likes_count", post_id, likes_count)
            post = self.posts.get(_oid(post_id))
            if post is None or post.likes_count != expected:
                return None
            post.likes_count = likes_count
            return post.model_copy()


class InMemoryNotificationRepository(_FaultInjection):
    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self.notifications: dict[str, Notification] = {}

    def insert(self, notification: Notification) -> Notification:
        with self._lock:
            self._write("insert", notification.post_id, notification.liked_by)
            created = notification.model_copy(update={"id": str(ObjectId())})
            self.notifications[created.id] = created
            return created.model_copy()

    def list_by_liked_by(self, user_id: str) -> list[Notification]:
        with self._lock:
            return [
                n.model_copy()
                for n in self.notifications.values()
                if n.liked_by == user_id
            ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(clock: FakeClock) -> SessionStore:
    return SessionStore(
        ttl=timedelta(seconds=DEFAULT_SESSION_TTL_SECONDS),
        clock=clock,
    )


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def post_repo() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def notification_repo() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def make_user(user_repo: InMemoryUserRepository):
    def _make(name: str, password: str = "secret") -> User:
        now = _now()
        return user_repo.insert(
            User(name=name, password=password, created_at=now, updated_at=now)
        )

    return _make


@pytest.fixture
def make_post(post_repo: InMemoryPostRepository):
    def _make(author: User, content: str = "hello") -> Post:
        now = _now()
        assert author.id is not None
        return post_repo.insert(
            Post(content=content, author=author.id, created_at=now, updated_at=now)
        )

    return _make


def identity_of(user: User) -> AuthenticatedUser:
    assert user.id is not None
    return AuthenticatedUser(user_id=user.id, username=user.name)


@pytest.fixture
def client(
    session_store: SessionStore,
    user_repo: InMemoryUserRepository,
    post_repo: InMemoryPostRepository,
    notification_repo: InMemoryNotificationRepository,
) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_post_repository] = lambda: post_repo
    app.dependency_overrides[get_notification_repository] = lambda: notification_repo

    with TestClient(app) as test_client:
        yield test_client
