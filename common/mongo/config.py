from __future__ import annotations

import os
from dataclasses import dataclass


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"


@dataclass(frozen=True, slots=True)
class MongoSettings:
    uri: str
    # None 이면 URI 경로(mongodb://host/<db>)의 기본 DB 를 쓴다.
    db_name: str | None = None


def load_mongo_settings() -> MongoSettings:
    """MONGO_URI 는 필수. 없으면 첫 DB 접근 시점에 RuntimeError 로 실패한다."""

    uri = os.getenv(MONGO_URI_ENV, "").strip()
    if not uri:
        raise RuntimeError(f"{MONGO_URI_ENV} environment variable is required for blog-service")

    db_name = os.getenv(MONGO_DB_NAME_ENV, "").strip()
    return MongoSettings(uri=uri, db_name=db_name or None)
