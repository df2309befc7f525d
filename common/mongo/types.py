from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.functional_validators import BeforeValidator
from typing_extensions import Annotated

from common.types.datetime import as_utc


DocumentT = TypeVar("DocumentT", bound="BaseDocument")


def coerce_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if value is None:
        raise TypeError("ObjectId cannot be None")
    return ObjectId(str(value))


def parse_object_id(value: str) -> ObjectId | None:
    """경로/폼으로 들어온 id 를 ObjectId 로 바꾼다. 형식이 틀리면 None.

    잘못된 id 는 "없는 도큐먼트"와 같게 취급한다.
    """

    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def id_to_str(value: Optional[ObjectId]) -> Optional[str]:
    return None if value is None else str(value)


PyObjectId = Annotated[ObjectId, BeforeValidator(coerce_object_id)]
MongoDateTime = Annotated[datetime, BeforeValidator(as_utc)]


class BaseDocument(BaseModel):
    """users/posts 도큐먼트 공통 베이스.

    도메인 모델은 id 를 문자열로, 도큐먼트는 _id 를 ObjectId 로 가진다.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: MongoDateTime
    updated_at: MongoDateTime

    @classmethod
    def from_model(cls: type[DocumentT], domain_model: BaseModel) -> DocumentT:
        data = domain_model.model_dump()
        data["_id"] = data.pop("id", None)
        return cls.model_validate(data)

    def to_mongo_record(self) -> dict[str, Any]:
        # _id 가 None 이면 빠지므로 insert 시 Mongo 가 ObjectId 를 생성한다.
        return self.model_dump(by_alias=True, exclude_none=True)
