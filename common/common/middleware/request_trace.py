import logging
import time
import uuid
from urllib.parse import parse_qs

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"

# 노이즈를 줄이기 위해 로그에서 제외할 엔드포인트 경로 목록
IGNORED_LOG_PATHS: set[str] = {"/health"}

# 비밀번호가 담긴 바디는 로그에 남기지 않는다. (경로 suffix 기준)
REDACTED_BODY_PATH_SUFFIXES: tuple[str, ...] = ("/sign-in", "/profile")
REDACTED_BODY = "[redacted]"

BODY_SNIPPET_MAX_LEN = 1024
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """공통 Request/Span ID 로그 미들웨어.

    - 들어오는 요청에서 X-Request-Id, X-Span-Id 를 읽고, 없으면 request_id만 새로 생성한다.
    - request.state 에 request_id, span_id 를 저장하고 응답 헤더에도 동일한 값을 설정한다.
    - 요청 완료/실패 시 한 줄씩 로그를 남긴다.
      인증 게이트가 request.state.user_id 를 채웠다면 함께 기록한다.
    - /sign-in, /profile 처럼 비밀번호가 오가는 요청의 바디는 가린다.
    """

    def __init__(
        self,
        app,
        logger: logging.Logger | None = None,
        redacted_suffixes: tuple[str, ...] = REDACTED_BODY_PATH_SUFFIXES,
    ) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")
        self._redacted_suffixes = redacted_suffixes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        span_id = request.headers.get(SPAN_ID_HEADER) or "0"

        request.state.request_id = request_id
        request.state.span_id = span_id
        request.state.request_body = await self._read_body_snippet(request)

        should_log = request.url.path not in IGNORED_LOG_PATHS
        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                self._logger.exception(
                    "request failed",
                    extra=self._build_log_extra(
                        request, duration=time.monotonic() - start
                    ),
                )
            raise

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        response.headers.setdefault(SPAN_ID_HEADER, span_id)

        if should_log:
            self._logger.info(
                "completed request",
                extra=self._build_log_extra(
                    request,
                    status=response.status_code,
                    duration=time.monotonic() - start,
                ),
            )

        return response

    async def _read_body_snippet(self, request: Request) -> str | None:
        if request.method not in BODY_METHODS:
            return None

        body_bytes = await request.body()
        if not body_bytes:
            return None
        if request.url.path.rstrip("/").endswith(self._redacted_suffixes):
            return REDACTED_BODY

        text = body_bytes.decode("utf-8", errors="replace")
        return text[:BODY_SNIPPET_MAX_LEN]

    def _build_log_extra(
        self,
        request: Request,
        status: int | None = None,
        duration: float | None = None,
    ) -> dict[str, object]:
        state = request.state
        extra: dict[str, object] = {
            "request_id": state.request_id,
            "span_id": state.span_id,
            "method": request.method,
            "path": request.url.path,
        }

        query = request.url.query
        if query:
            parsed = parse_qs(query, keep_blank_values=True)
            if parsed:
                extra["query_params"] = {
                    key: values[0] if len(values) == 1 else values
                    for key, values in parsed.items()
                }

        body = getattr(state, "request_body", None)
        if body:
            extra["body"] = body

        user_id = getattr(state, "user_id", None)
        if user_id:
            extra["user_id"] = user_id

        if status is not None:
            extra["status"] = status

        if duration is not None:
            extra["duration"] = f"{duration * 1000:.3f}ms"

        return extra
