from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from pymongo.errors import AutoReconnect, ExecutionTimeout, PyMongoError, WTimeoutError

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client

from .api.health import router as health_router
from .api.v1 import api_router
from .config import load_config
from .exceptions import (
    SocialServiceError,
    StoreUnavailableError,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    try:
        yield
    finally:
        close_client()


async def handle_service_error(
    request: Request, exc: SocialServiceError
) -> PlainTextResponse:
    # LikePartiallyAppliedError 의 단계 정보는 LikesService 가 이미 로그로 남겼다.
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    return PlainTextResponse("Invalid request body", status_code=400)


async def handle_store_error(request: Request, exc: PyMongoError) -> PlainTextResponse:
    if isinstance(exc, (AutoReconnect, ExecutionTimeout, WTimeoutError)) or getattr(
        exc, "timeout", False
    ):
        logger.error("MongoDB unavailable: %s", exc)
        unavailable = StoreUnavailableError()
        return PlainTextResponse(
            unavailable.message, status_code=unavailable.status_code
        )

    logger.error("unexpected MongoDB error", exc_info=exc)
    return PlainTextResponse("Server error", status_code=500)


def create_app() -> FastAPI:
    setup_logger(name="social-service")
    app = FastAPI(
        title="Social Network Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 공통 Request/Span ID 로그 미들웨어
    app.add_middleware(RequestTraceMiddleware)

    app.add_exception_handler(SocialServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(PyMongoError, handle_store_error)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def main() -> None:
    import uvicorn

    config = load_config()
    uvicorn.run(
        "social_service.app.main:app",
        host="0.0.0.0",
        port=config.port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
