from __future__ import annotations

from enum import Enum


class SocialServiceError(Exception):
    """Base exception for all social-service errors.

    Every subclass carries the HTTP status and the plain message rendered to
    the caller; no structured error codes are exposed.
    """

    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UnauthenticatedError(SocialServiceError):
    """No session cookie, or the session is unknown or expired."""

    status_code = 401
    message = "Unauthorized"


class InvalidCredentialsError(UnauthenticatedError):
    """Unknown username or wrong password (indistinguishable on purpose)."""

    message = "Invalid username or password"


class BadRequestError(SocialServiceError):
    status_code = 400
    message = "Bad request"


class NotFoundError(SocialServiceError):
    status_code = 404
    message = "Not found"


class UserNotFoundError(NotFoundError):
    message = "User not found"


class PostNotFoundError(NotFoundError):
    message = "Post not found"


class ConflictError(SocialServiceError):
    status_code = 409
    message = "Conflict"


class UserAlreadyExistsError(ConflictError):
    message = "User already exists"


class AlreadyLikedError(ConflictError):
    """The idempotency guard of the like workflow tripped."""

    message = "Post is already liked by you"


class LikesCountChangedError(ConflictError):
    """likesCount moved between reconcile's read and its write."""

    message = "Post likes changed during reconcile, retry"


class StoreUnavailableError(SocialServiceError):
    """MongoDB unreachable or slower than the configured timeout."""

    status_code = 503
    message = "Service unavailable"


class LikeStep(str, Enum):
    """Ordered writes of a single like action."""

    CREATE_NOTIFICATION = "create_notification"
    INCREMENT_LIKES_COUNT = "increment_likes_count"
    ADD_LIKED_POST = "add_liked_post"
    ADD_USER_NOTIFICATION = "add_user_notification"


class LikePartiallyAppliedError(SocialServiceError):
    """A like step failed after earlier steps were committed.

    Nothing is rolled back; ``applied_steps`` tells an operator what to
    reconcile.
    """

    def __init__(
        self,
        *,
        post_id: str,
        notification_id: str,
        applied_steps: list[LikeStep],
        failed_step: LikeStep,
    ) -> None:
        super().__init__()
        self.post_id = post_id
        self.notification_id = notification_id
        self.applied_steps = applied_steps
        self.failed_step = failed_step
