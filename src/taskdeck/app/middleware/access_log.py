import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("taskdeck.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured request.start / request.end lines tied together by a request id."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        base = {
            "category": "http",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        start = time.perf_counter()
        logger.debug("request.start", extra={**base, "event": "request.start"})

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={**base, "event": "request.error", "duration_ms": _elapsed_ms(start)},
            )
            raise

        response.headers["X-Request-ID"] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "request.end",
            extra={
                **base,
                "event": "request.end",
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(start),
            },
        )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
