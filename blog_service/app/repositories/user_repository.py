from __future__ import annotations

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.models.user import User
from common.types.datetime import utc_now

from .documents.user_document import UserDocument
from .interfaces import DuplicateUsername, UserRepositoryInterface


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        return UserDocument.model_validate(doc).to_domain()

    def find_by_username(self, username: str) -> User | None:
        doc = self._col.find_one({"username": username})
        if not doc:
            return None
        return self._from_document(doc)

    def insert(self, user: User) -> User:
        now = utc_now()
        user.created_at = now
        user.updated_at = now

        payload = UserDocument.from_domain(user).to_mongo_record()
        try:
            result = self._col.insert_one(payload)
        except DuplicateKeyError as exc:
            # uniq_username 인덱스가 동시 가입 경쟁을 막는다.
            raise DuplicateUsername(user.username) from exc

        payload["_id"] = result.inserted_id
        return self._from_document(payload)
