from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client

from .api import api_router
from .api.errors import register_exception_handlers
from .api.health import router as health_router
from .config import AppConfig, get_app_config


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    logger.info("blog-service starting up")
    try:
        yield
    finally:
        close_client()
        logger.info("blog-service stopped")


def create_app(config: AppConfig | None = None) -> FastAPI:
    """FastAPI 앱 팩토리.

    config 를 넘기지 않으면 환경변수/config.yaml 에서 로드한다.
    """

    setup_logger(name="blog-service")

    app = FastAPI(
        title="Blog Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    if config is None:
        config = get_app_config()
    else:
        # 라우터 의존성도 주입받은 설정을 보도록 한다.
        resolved = config
        app.dependency_overrides[get_app_config] = lambda: resolved

    # 프론트엔드가 다른 도메인에서 쿠키와 함께 호출한다.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTraceMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    return app


def main() -> None:
    """명령행에서 실행할 수 있도록 uvicorn 런처를 제공한다."""

    import uvicorn

    port = int(os.getenv("BLOG_SERVICE_PORT", "4000"))
    uvicorn.run(
        "blog_service.app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
