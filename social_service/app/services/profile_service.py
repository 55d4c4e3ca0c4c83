from __future__ import annotations

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import BadRequestError, UserNotFoundError
from ..models.identity import AuthenticatedUser
from ..models.user import User, UserProfileUpdate
from ..repositories.interfaces import UserRepositoryInterface
from ..repositories.user_repository import UserRepository


class ProfileService:
    """로그인한 유저 본인의 프로필 조회/수정 비즈니스 로직."""

    def __init__(self, user_repo: UserRepositoryInterface) -> None:
        self._user_repo = user_repo

    def get_profile(self, identity: AuthenticatedUser) -> User:
        user = self._user_repo.find_by_id(identity.user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def update_profile(
        self, identity: AuthenticatedUser, update: UserProfileUpdate
    ) -> None:
        """name / avatar 중 비어 있지 않은 값만 수정한다.

        - 수정할 값이 하나도 없으면 BadRequestError.
        - 세션에 담긴 username 은 바꾸지 않는다. 다음 로그인부터 새 이름이 반영된다.
        """

        fields = update.to_fields()
        if not fields:
            raise BadRequestError("No update fields provided")

        if not self._user_repo.update_profile(identity.user_id, fields):
            raise UserNotFoundError()


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_profile_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> ProfileService:
    """FastAPI DI용 ProfileService 팩토리."""

    return ProfileService(user_repo)
