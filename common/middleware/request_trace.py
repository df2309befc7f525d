import logging
import time
import uuid
from dataclasses import dataclass
from urllib.parse import parse_qsl

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"

# 헬스체크는 로그를 남기지 않는다.
SILENT_PATHS = frozenset({"/health"})

# 비밀번호가 담기는 요청은 바디를 로그에 남기지 않는다.
CREDENTIAL_PATHS = frozenset({"/login", "/register"})

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
MAX_BODY_LOG_LENGTH = 1024


@dataclass(frozen=True, slots=True)
class TraceContext:
    request_id: str
    span_id: str

    @classmethod
    def from_request(cls, request: Request) -> "TraceContext":
        """X-Request-Id 가 없으면 새로 만들고, span 은 "0" 부터 시작한다."""

        return cls(
            request_id=request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex,
            span_id=request.headers.get(SPAN_ID_HEADER) or "0",
        )

    def apply(self, response: Response) -> None:
        response.headers.setdefault(REQUEST_ID_HEADER, self.request_id)
        response.headers.setdefault(SPAN_ID_HEADER, self.span_id)


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """요청 단위 trace id 전파 + 요청당 한 줄 로그.

    - request.state.request_id / span_id 에 trace id 를 남겨 핸들러에서도 쓸 수 있게 한다.
    - JSON 바디만 잘라서 기록한다. 멀티파트(커버 업로드)와 인증 요청은 제외.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        trace = TraceContext.from_request(request)
        request.state.request_id = trace.request_id
        request.state.span_id = trace.span_id

        body = await _body_snippet(request)
        silent = request.url.path in SILENT_PATHS
        started = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if not silent:
                self._logger.exception(
                    "request failed",
                    extra=_log_extra(request, trace, body, started),
                )
            raise

        trace.apply(response)
        if not silent:
            self._logger.info(
                "completed request",
                extra=_log_extra(request, trace, body, started, response.status_code),
            )
        return response


async def _body_snippet(request: Request) -> str | None:
    if request.method not in BODY_METHODS or request.url.path in CREDENTIAL_PATHS:
        return None
    if not request.headers.get("content-type", "").startswith("application/json"):
        return None

    raw = await request.body()
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace")[:MAX_BODY_LOG_LENGTH]


def _log_extra(
    request: Request,
    trace: TraceContext,
    body: str | None,
    started: float,
    status: int | None = None,
) -> dict[str, object]:
    extra: dict[str, object] = {
        "request_id": trace.request_id,
        "span_id": trace.span_id,
        "method": request.method,
        "path": request.url.path,
        "duration": f"{(time.monotonic() - started) * 1000:.3f}ms",
    }

    # ?page=2&limit=5 처럼 단일 값이 대부분이라 마지막 값만 남긴다.
    params = dict(parse_qsl(request.url.query, keep_blank_values=True))
    if params:
        extra["query_params"] = params
    if body:
        extra["body"] = body
    if status is not None:
        extra["status"] = status
    return extra
