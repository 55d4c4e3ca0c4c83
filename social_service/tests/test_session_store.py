from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from social_service.app.config import DEFAULT_SESSION_TTL_SECONDS
from social_service.app.repositories.session_store import (
    SESSION_TOKEN_BYTES,
    SessionStore,
    generate_session_token,
)


def test_create_then_resolve_returns_same_identity(session_store, clock):
    session = session_store.create(username="alice", user_id="user-1")

    resolved = session_store.resolve(session.token)

    assert resolved is not None
    assert resolved.user_id == "user-1"
    assert resolved.username == "alice"
    assert session.expires_at == clock.now + timedelta(
        seconds=DEFAULT_SESSION_TTL_SECONDS
    )


def test_tokens_are_unique_hex_strings(session_store):
    tokens = {
        session_store.create(username="alice", user_id="user-1").token
        for _ in range(100)
    }

    assert len(tokens) == 100
    for token in tokens:
        assert len(token) == SESSION_TOKEN_BYTES * 2
        int(token, 16)


def test_two_sessions_for_same_user_are_independent(session_store):
    first = session_store.create(username="alice", user_id="user-1")
    second = session_store.create(username="alice", user_id="user-1")

    session_store.invalidate(first.token)

    assert session_store.resolve(first.token) is None
    assert session_store.resolve(second.token) is not None


def test_resolve_unknown_token_returns_none(session_store):
    assert session_store.resolve("never-issued") is None
    assert session_store.resolve("") is None


def test_expired_session_is_evicted_on_resolve(session_store, clock):
    session = session_store.create(username="alice", user_id="user-1")

    # 만료 직전까지는 유효하다.
    clock.advance(DEFAULT_SESSION_TTL_SECONDS - 1)
    assert session_store.resolve(session.token) is not None

    # expires_at 과 같은 시각부터 만료로 본다.
    clock.advance(1)
    assert session.token in session_store
    assert session_store.resolve(session.token) is None
    assert session.token not in session_store
    assert len(session_store) == 0


def test_invalidate_is_idempotent(session_store):
    session = session_store.create(username="alice", user_id="user-1")

    session_store.invalidate(session.token)
    session_store.invalidate(session.token)
    session_store.invalidate("never-issued")

    assert session_store.resolve(session.token) is None


def test_entropy_failure_propagates_and_stores_nothing(clock):
    def broken_token_factory() -> str:
        raise OSError("entropy source unavailable")

    store = SessionStore(
        ttl=timedelta(hours=1), clock=clock, token_factory=broken_token_factory
    )

    with pytest.raises(OSError):
        store.create(username="alice", user_id="user-1")
    assert len(store) == 0


def test_non_positive_ttl_is_rejected():
    with pytest.raises(ValueError):
        SessionStore(ttl=timedelta(0))


def test_generate_session_token_length():
    assert len(generate_session_token()) == 32


def test_concurrent_create_resolve_invalidate(session_store):
    per_thread = 200
    kept: list[str] = []
    kept_lock = threading.Lock()

    def worker(index: int) -> None:
        for i in range(per_thread):
            session = session_store.create(
                username=f"user-{index}", user_id=f"id-{index}"
            )
            assert session_store.resolve(session.token) is not None
            if i % 2 == 0:
                session_store.invalidate(session.token)
            else:
                with kept_lock:
                    kept.append(session.token)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(session_store) == len(kept) == 8 * per_thread // 2
    assert all(session_store.resolve(token) is not None for token in kept)
