from __future__ import annotations

from common.models.user import User
from common.mongo.types import BaseDocument, id_to_str


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델."""

    username: str
    password_hash: str

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        return cls.from_model(user)

    def to_domain(self) -> User:
        return User(
            id=id_to_str(self.id),
            username=self.username,
            password_hash=self.password_hash,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
