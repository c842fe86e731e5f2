"""
Request logging middleware.

Each request gets a short request ID, returned in the X-Request-ID header
and attached to error responses, plus its handling time in
X-Response-Time.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger(__name__)


def get_request_id() -> str:
    """Request ID of the request being handled ("" outside a request)."""
    return request_id_ctx.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its ID, status and duration.

    Client errors log at WARNING and server errors at ERROR so failed
    series saves stand out from routine calendar reads.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = uuid.uuid4().hex[:8]
        token = request_id_ctx.set(req_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{req_id}] {request.method} {request.url.path} failed after "
                f"{time.perf_counter() - started:.3f}s: {e}",
                exc_info=True,
            )
            raise
        finally:
            request_id_ctx.reset(token)

        elapsed = time.perf_counter() - started
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            f"[{req_id}] {request.method} {request.url.path} -> "
            f"{response.status_code} in {elapsed:.3f}s",
            extra={"request_id": req_id, "status_code": response.status_code},
        )

        response.headers["X-Request-ID"] = req_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response
