"""Domain exceptions and the standardized error responses built from them."""
from typing import Any

import sentry_sdk
import structlog
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope returned by all API error handlers."""
    error: str
    message: str
    detail: Any = None
    request_id: str = "unknown"


logger = structlog.get_logger()


class PortfolAIError(Exception):
    """Base for errors the API surfaces to callers with a fixed status and code."""

    status_code = 500
    error_code = "internal_server_error"

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(PortfolAIError):
    """Malformed input (empty notes, bad time format). No state is changed."""

    status_code = 400
    error_code = "validation_error"


class NotFoundError(PortfolAIError):
    """Resource missing or owned by someone else; the two cases are indistinguishable."""

    status_code = 404
    error_code = "not_found"


class SummarizationError(PortfolAIError):
    """The AI call failed or returned content that could not be parsed."""

    status_code = 502
    error_code = "summarization_failed"


class PersistenceError(PortfolAIError):
    """A storage write failed after the work leading up to it succeeded."""

    status_code = 500
    error_code = "persistence_error"


class QuoteUnavailableError(PortfolAIError):
    """The stock quote provider could not be reached or answered with an error."""

    status_code = 502
    error_code = "quote_unavailable"


async def domain_exception_handler(request: Request, exc: PortfolAIError) -> JSONResponse:
    """Render a PortfolAIError into the standard envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request.domain_error",
        error=exc.error_code,
        message=exc.message,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error_code,
            message=exc.message,
            detail=exc.detail,
            request_id=request_id,
        ).model_dump(),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a consistent JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )

    sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred.",
            "request_id": request_id,
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Standardize HTTPException responses into the same JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    if isinstance(exc.detail, dict):
        error = exc.detail.get("error", f"http_{exc.status_code}")
        message = exc.detail.get("message", str(exc.detail))
        detail: Any = exc.detail.get("detail")
    else:
        error = f"http_{exc.status_code}"
        message = str(exc.detail)
        detail = exc.detail

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error,
            "message": message,
            "detail": detail,
            "request_id": request_id,
        },
        headers=dict(exc.headers or {}),
    )
