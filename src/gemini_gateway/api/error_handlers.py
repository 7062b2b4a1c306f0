"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Every error body has the
shape {"error": message}.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_gateway.llm.exceptions import (
    UpstreamError,
    UpstreamTimeoutError,
)

logger = structlog.get_logger(__name__)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies.
    
    Maps to 400 Bad Request (client error).
    """
    logger.warning("Invalid request body", errors=exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Handle upstream failures, timeouts included.
    
    Maps to 500 with the provider's message when there is one.
    """
    logger.error(
        "Upstream error",
        error_type=type(exc).__name__,
        error=exc.message,
        details=exc.details,
        timeout=isinstance(exc, UpstreamTimeoutError),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message or "Server error"},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the common error shape."""
    message = "Not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.
    
    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RequestValidationError: request_validation_error_handler,
    UpstreamError: upstream_error_handler,
    StarletteHTTPException: http_exception_handler,
    Exception: generic_error_handler,
}
