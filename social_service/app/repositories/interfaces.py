from __future__ import annotations

from typing import Protocol

from ..models.notification import Notification
from ..models.post import Post
from ..models.session import Session
from ..models.user import User


class SessionStoreInterface(Protocol):
    """세션 저장소가 따라야 할 최소한의 계약.

    - token -> Session 매핑을 프로세스 전역에서 소유한다.
    - 만료된 세션은 resolve 시점에 지연 삭제된다.
    """

    def create(self, username: str, user_id: str) -> Session:  # pragma: no cover - Protocol
        ...

    def resolve(self, token: str) -> Session | None:  # pragma: no cover - Protocol
        ...

    def invalidate(self, token: str) -> None:  # pragma: no cover - Protocol
        ...


class UserRepositoryInterface(Protocol):
    """UserRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    집합 필드(posts, liked_posts, notifications)는 모두 add-to-set 으로만 갱신한다.
    """

    def find_by_name(self, name: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, user_id: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def insert(self, user: User) -> User:  # pragma: no cover - Protocol
        """이름이 중복되면 UserAlreadyExistsError 를 던진다."""
        ...

    def update_profile(
        self, user_id: str, fields: dict[str, str]
    ) -> bool:  # pragma: no cover - Protocol
        ...

    def add_post(self, user_id: str, post_id: str) -> None:  # pragma: no cover - Protocol
        ...

    def add_liked_post(
        self, user_id: str, post_id: str
    ) -> bool:  # pragma: no cover - Protocol
        """새로 추가되었으면 True, 이미 있었으면 False."""
        ...

    def add_notification(
        self, user_id: str, notification_id: str
    ) -> None:  # pragma: no cover - Protocol
        ...

    def count_by_liked_post(self, post_id: str) -> int:  # pragma: no cover - Protocol
        ...


class PostRepositoryInterface(Protocol):
    def insert(self, post: Post) -> Post:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, post_id: str) -> Post | None:  # pragma: no cover - Protocol
        ...

    def list_by_author(self, author_id: str) -> list[Post]:  # pragma: no cover - Protocol
        ...

    def list_by_ids(self, post_ids: list[str]) -> list[Post]:  # pragma: no cover - Protocol
        ...

    def increment_likes_count(
        self, post_id: str, amount: int = 1
    ) -> bool:  # pragma: no cover - Protocol
        """매칭된 포스트가 없으면 False."""
        ...

    def set_likes_count(
        self, post_id: str, likes_count: int, expected: int
    ) -> Post | None:  # pragma: no cover - Protocol
        ...


class NotificationRepositoryInterface(Protocol):
    def insert(
        self, notification: Notification
    ) -> Notification:  # pragma: no cover - Protocol
        ...

    def list_by_liked_by(
        self, user_id: str
    ) -> list[Notification]:  # pragma: no cover - Protocol
        ...
