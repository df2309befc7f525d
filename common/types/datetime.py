from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """naive datetime 은 UTC 로 간주하고, aware datetime 은 UTC 로 변환한다.

    pymongo 는 기본 설정에서 tz 정보 없는 datetime 을 돌려준다.
    """

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_iso8601(value: datetime) -> str:
    return as_utc(value).isoformat()


# API 응답에서 created_at/updated_at 을 "+00:00" 이 붙은 ISO8601 로 내보낸다.
UtcDateTime = Annotated[
    datetime,
    PlainSerializer(to_utc_iso8601, return_type=str, when_used="json"),
]
