"""Request tracing middleware."""

import re
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")

# Query parameters never written to logs
_SECRET_PARAMS = frozenset({"key", "api_key", "apikey"})


def resolve_request_id(incoming: Optional[str]) -> str:
    """Reuse a well-formed caller-supplied request id, otherwise mint a UUID4."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


def loggable_params(request: Request) -> Optional[dict[str, str]]:
    """Query parameters with secret values masked (None when there are none)."""
    if not request.query_params:
        return None
    return {
        name: "***" if name.lower() in _SECRET_PARAMS else value
        for name, value in request.query_params.items()
    }


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and echo it in X-Request-ID.

    Request bodies are never logged: OCR payloads are large base64 images.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger.debug("Request started", query_params=loggable_params(request))

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
