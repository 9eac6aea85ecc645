"""API middleware: error handling and request timing.

Registers exception handlers and a request timing middleware
on the FastAPI app. Every domain error is rendered as
``{"error": true, "code": ..., "message": ...}``.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from decision_graph.domain.errors import (
    DecisionGraphError,
    DependencyError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR: dict[type[DecisionGraphError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    DependencyError: 502,
}


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"error": True, "code": code, "message": message}


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def _domain_error_handler(
    request: Request,
    exc: DecisionGraphError,
) -> ORJSONResponse:
    """Convert a domain error to its mapped status code."""
    status_code = _STATUS_BY_ERROR.get(type(exc), 500)
    if isinstance(exc, DependencyError):
        logger.warning(
            "dependency_failed",
            path=request.url.path,
            dependency=exc.dependency,
            error=exc.message,
        )
    return ORJSONResponse(status_code=status_code, content=error_body(exc.code, exc.message))


async def _generic_error_handler(
    _request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """Convert unhandled exceptions to a structured 500 response."""
    logger.error("unhandled_exception", exc_info=exc)
    return ORJSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", "Internal server error"),
    )


# ---------------------------------------------------------------------------
# Request timing middleware
# ---------------------------------------------------------------------------


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Adds an X-Request-Time-Ms header to every response."""

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        start_time = time.monotonic()
        response: Response = await call_next(request)
        elapsed_ms = (time.monotonic() - start_time) * 1000
        response.headers["X-Request-Time-Ms"] = f"{elapsed_ms:.1f}"
        return response


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register_middleware(app: FastAPI) -> None:
    """Attach all middleware and exception handlers to the app."""
    app.add_exception_handler(DecisionGraphError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_error_handler)
    app.add_middleware(RequestTimingMiddleware)
