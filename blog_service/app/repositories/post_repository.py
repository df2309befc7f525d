from __future__ import annotations

from pymongo import ReturnDocument
from pymongo.database import Database

from common.models.post import Post
from common.mongo.types import parse_object_id
from common.types.datetime import utc_now

from .documents.post_document import PostDocument
from .interfaces import PostRepositoryInterface


# 최신순. created_at 이 같으면 나중에 삽입된(_id 가 큰) 도큐먼트가 먼저 온다.
LIST_SORT = [("created_at", -1), ("_id", -1)]


class PostRepository(PostRepositoryInterface):
    """posts 컬렉션에 대한 MongoDB 접근 레이어.

    모든 쓰기는 단일 도큐먼트 연산이며, 작성자 검증은 서비스 레이어의 책임이다.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["posts"]

    @staticmethod
    def _from_document(doc: dict) -> Post:
        return PostDocument.model_validate(doc).to_domain()

    def insert(self, post: Post) -> Post:
        now = utc_now()
        post.created_at = now
        post.updated_at = now

        payload = PostDocument.from_domain(post).to_mongo_record()
        result = self._col.insert_one(payload)
        payload["_id"] = result.inserted_id
        return self._from_document(payload)

    def find_by_id(self, id_value: str) -> Post | None:
        object_id = parse_object_id(id_value)
        if object_id is None:
            return None
        doc = self._col.find_one({"_id": object_id})
        if not doc:
            return None
        return self._from_document(doc)

    def update_fields(self, id_value: str, updates: dict) -> Post | None:
        object_id = parse_object_id(id_value)
        if object_id is None:
            return None

        set_doc = {"updated_at": utc_now()}
        set_doc.update(updates)
        doc = self._col.find_one_and_update(
            {"_id": object_id},
            {"$set": set_doc},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def delete_by_id(self, id_value: str) -> bool:
        object_id = parse_object_id(id_value)
        if object_id is None:
            return False
        result = self._col.delete_one({"_id": object_id})
        return result.deleted_count > 0

    def list(self, skip: int, limit: int) -> tuple[list[Post], int]:
        # 동시 생성/삭제에 맞춰 매 호출마다 다시 센다.
        total = self._col.count_documents({})
        if skip >= total:
            # 마지막 페이지 이후는 find 없이 빈 목록. (skip 이 int64 를 넘을 수도 있다)
            return [], total

        cursor = self._col.find(
            {},
            sort=LIST_SORT,
            skip=skip,
            limit=limit,
        )

        items: list[Post] = []
        for doc in cursor:
            items.append(self._from_document(doc))

        return items, total
