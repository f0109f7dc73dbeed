"""Request ID middleware."""

import time
from contextvars import ContextVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from awake.core.identifiers import generate_request_id
from awake.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

request_id_context: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an ID.

    The ID is taken from the X-Request-ID header when the client sends one,
    otherwise generated. It is stored on request.state, exposed to log
    records through a context variable and echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        request.state.request_id = req_id
        token = request_id_context.set(req_id)

        start_time = time.perf_counter()
        logger.info(
            "Request started",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "request_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = req_id
            logger.info(
                "Request completed",
                extra={
                    "request_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )
            return response
        finally:
            request_id_context.reset(token)


def get_request_id() -> str:
    """
    Get the current request ID from context.

    Returns:
        Current request ID or empty string if not in request context
    """
    return request_id_context.get()
