import json
import logging
import os
import sys


# 요청 추적 미들웨어와 서비스 레이어가 extra 로 넘기는 필드
EXTRA_KEYS = (
    "request_id",
    "span_id",
    "method",
    "path",
    "query_params",
    "status",
    "body",
    "duration",
    "user_id",
    "post_id",
)


def setup_logger(name: str = "blog-service", level: str | None = None) -> logging.Logger:
    """JSON 한 줄 포맷으로 stdout 에 기록하는 서비스 로거를 구성한다.

    Args:
        name: 로거 이름. SERVICE_NAME 환경변수가 있으면 그 값을 쓴다.
        level: 로그 레벨. None 이면 LOG_LEVEL 환경변수, 없으면 INFO.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)
    service_name = os.getenv("SERVICE_NAME", name)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter(service_name))

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)
    # 테스트에서 create_app 이 반복 호출되어도 한 줄씩만 찍히도록 교체한다.
    logger.handlers[:] = [handler]

    # blog_service.app.* 모듈 로거는 루트로 전파된다.
    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
        root.setLevel(log_level)

    return logger


class JsonFormatter(logging.Formatter):
    """datetime/level/logger/message + EXTRA_KEYS + service_name 을 담은 JSON 포맷터."""

    def __init__(self, service_name: str | None = None) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")
        self._service_name = service_name

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "datetime": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )

        service_name = getattr(record, "service_name", None) or self._service_name
        if service_name:
            payload["service_name"] = service_name

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # datetime, ObjectId 같은 값이 extra 로 들어와도 깨지지 않게 문자열로 떨어뜨린다.
        return json.dumps(payload, ensure_ascii=False, default=str)
