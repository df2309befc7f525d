from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from ..exceptions import BlogServiceError


logger = logging.getLogger(__name__)


async def handle_blog_service_error(request: Request, exc: BlogServiceError) -> JSONResponse:
    if exc.status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=int(exc.status), content={"detail": exc.message})


async def handle_storage_error(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(
        "storage error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """도메인 예외를 HTTPException 과 같은 {"detail": ...} 형태로 응답한다."""

    app.add_exception_handler(BlogServiceError, handle_blog_service_error)  # type: ignore[arg-type]
    app.add_exception_handler(PyMongoError, handle_storage_error)  # type: ignore[arg-type]
