from __future__ import annotations

from datetime import datetime, timezone

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.mongo.types import to_object_id

from ..exceptions import UserAlreadyExistsError
from ..models.user import User
from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        document = UserDocument.model_validate(doc)
        return document.to_domain()

    def find_by_name(self, name: str) -> User | None:
        doc = self._col.find_one({"name": name})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_id(self, user_id: str) -> User | None:
        doc = self._col.find_one({"_id": to_object_id(user_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def insert(self, user: User) -> User:
        now = datetime.now(timezone.utc)
        user.created_at = now
        user.updated_at = now

        payload = UserDocument.from_domain(user).to_mongo_record()
        try:
            result = self._col.insert_one(payload)
        except DuplicateKeyError as exc:
            # 동시에 같은 이름으로 가입한 경우 uniq_name 인덱스가 두 번째 insert 를 막는다.
            raise UserAlreadyExistsError() from exc

        payload["_id"] = result.inserted_id
        return self._from_document(payload)

    def update_profile(self, user_id: str, fields: dict[str, str]) -> bool:
        now = datetime.now(timezone.utc)
        try:
            result = self._col.update_one(
                {"_id": to_object_id(user_id)},
                {"$set": {**fields, "updated_at": now}},
            )
        except DuplicateKeyError as exc:
            raise UserAlreadyExistsError() from exc
        return result.matched_count > 0

    def add_post(self, user_id: str, post_id: str) -> None:
        self._add_to_set(user_id, "posts", post_id)

    def add_liked_post(self, user_id: str, post_id: str) -> bool:
        return self._add_to_set(user_id, "likedPosts", post_id)

    def add_notification(self, user_id: str, notification_id: str) -> None:
        self._add_to_set(user_id, "notifications", notification_id)

    def count_by_liked_post(self, post_id: str) -> int:
        return self._col.count_documents({"likedPosts": to_object_id(post_id)})

    def _add_to_set(self, user_id: str, field: str, value: str) -> bool:
        """field 집합에 value 를 추가하고, 새로 추가되었는지 여부를 반환한다.

        $addToSet 은 이미 있는 값이면 아무것도 하지 않으므로 재시도해도 안전하다.
        updated_at 도 함께 $set 하기 때문에 modified_count 대신 $ne 필터 매칭 여부로 판단한다.
        """

        oid = to_object_id(value)
        result = self._col.update_one(
            {"_id": to_object_id(user_id), field: {"$ne": oid}},
            {
                "$addToSet": {field: oid},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        return result.matched_count > 0
