from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, PyMongoError

from .config import MongoSettings, load_mongo_settings


logger = logging.getLogger(__name__)


# 컬렉션별로 앱 기동 시 보장해야 하는 인덱스
INDEXES: dict[str, list[IndexModel]] = {
    "posts": [
        # 목록 조회 정렬(created_at desc, _id desc)과 동일한 순서
        IndexModel([("created_at", DESCENDING), ("_id", DESCENDING)], name="idx_created_at_id_desc"),
        IndexModel([("author_id", ASCENDING)], name="idx_author_id"),
    ],
    "users": [
        IndexModel([("username", ASCENDING)], name="uniq_username", unique=True),
    ],
}


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def _connect(settings: MongoSettings) -> tuple[MongoClient, Database]:
    client: MongoClient = MongoClient(settings.uri, tz_aware=True)
    try:
        client.admin.command("ping")
        if settings.db_name:
            db = client[settings.db_name]
        else:
            db = client.get_default_database()
    except ConfigurationError as exc:
        client.close()
        raise RuntimeError(
            "MongoDB database name must be set via MONGO_DB_NAME or in MONGO_URI",
        ) from exc
    except PyMongoError as exc:
        client.close()
        raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc
    return client, db


def ensure_indexes(db: Database) -> None:
    """create_indexes 는 이미 같은 정의가 있으면 아무 것도 하지 않는다."""

    for collection, indexes in INDEXES.items():
        db[collection].create_indexes(indexes)


def get_database() -> Database:
    """프로세스 전역 Database. 첫 호출 시 연결하고 인덱스를 보장한다."""

    global _client, _db

    if _db is not None:
        return _db

    with _lock:
        if _db is None:
            client, db = _connect(load_mongo_settings())
            ensure_indexes(db)
            _client, _db = client, db
            logger.info("MongoDB connected (db=%s)", db.name)
    return _db


def close_client() -> None:
    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None
