from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.database import Database

from common.mongo.types import to_object_id, to_object_ids

from ..models.post import Post
from .documents.post_document import PostDocument
from .interfaces import PostRepositoryInterface


class PostRepository(PostRepositoryInterface):
    """posts 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["posts"]

    # --- helpers -----------------------------------------------------------------
    @staticmethod
    def _from_document(doc: dict) -> Post:
        return PostDocument.model_validate(doc).to_domain()

    def _find_many(self, filter_doc: dict) -> list[Post]:
        cursor = self._col.find(filter_doc, sort=[("_id", 1)])
        return [self._from_document(doc) for doc in cursor]

    # --- commands ----------------------------------------------------------------
    def insert(self, post: Post) -> Post:
        now = datetime.now(timezone.utc)
        post.created_at = now
        post.updated_at = now

        payload = PostDocument.from_domain(post).to_mongo_record()
        result = self._col.insert_one(payload)
        payload["_id"] = result.inserted_id
        return self._from_document(payload)

    def increment_likes_count(self, post_id: str, amount: int = 1) -> bool:
        """likesCount 를 서버 측 $inc 로 증가시킨다.

        read-modify-write 를 하지 않으므로 동시에 여러 좋아요가 들어와도 갱신이 유실되지 않는다.
        """

        result = self._col.update_one(
            {"_id": to_object_id(post_id)},
            {
                "$inc": {"likesCount": amount},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        return result.matched_count > 0

    def set_likes_count(
        self, post_id: str, likes_count: int, expected: int
    ) -> Post | None:
        """likesCount 가 아직 expected 일 때만 likes_count 로 덮어쓴다.

        그 사이 다른 $inc 가 끼어들었거나 포스트가 없으면 None.
        """

        doc = self._col.find_one_and_update(
            {"_id": to_object_id(post_id), "likesCount": expected},
            {
                "$set": {
                    "likesCount": likes_count,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    # --- queries -----------------------------------------------------------------
    def find_by_id(self, post_id: str) -> Post | None:
        doc = self._col.find_one({"_id": to_object_id(post_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def list_by_author(self, author_id: str) -> list[Post]:
        return self._find_many({"author": to_object_id(author_id)})

    def list_by_ids(self, post_ids: list[str]) -> list[Post]:
        if not post_ids:
            return []
        return self._find_many({"_id": {"$in": to_object_ids(post_ids)}})
