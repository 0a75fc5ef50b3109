"""
API middleware stack.

- Request ID injection (X-Request-ID header)
- Structured request/response logging
- Error mapping for flow and provider failures
"""
from __future__ import annotations

import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from shared.errors import (
    InvalidFlowArgumentError,
    InvalidTeamIdError,
    NoUpcomingMatchError,
    ProviderUnavailableError,
    UnknownFlowCardError,
)
from shared.utils.logging import get_logger

logger = get_logger(__name__)

QUIET_PATHS = ("/health", "/metrics")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Injects a unique X-Request-ID header into every request/response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured request/response information."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start = time.monotonic()
        response = await call_next(request)
        logger.info(
            "http_request",
            method=request.method,
            path=path,
            status=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
            request_id=getattr(request.state, "request_id", "unknown"),
        )
        return response


def _error(request: Request, status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": str(exc),
            "request_id": getattr(request.state, "request_id", "unknown"),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Map service errors onto HTTP responses."""

    @app.exception_handler(InvalidTeamIdError)
    async def invalid_team_handler(request: Request, exc: InvalidTeamIdError) -> JSONResponse:
        return _error(request, 400, "invalid_team_id", exc)

    @app.exception_handler(InvalidFlowArgumentError)
    async def invalid_argument_handler(request: Request, exc: InvalidFlowArgumentError) -> JSONResponse:
        return _error(request, 400, "invalid_argument", exc)

    @app.exception_handler(UnknownFlowCardError)
    async def unknown_card_handler(request: Request, exc: UnknownFlowCardError) -> JSONResponse:
        return _error(request, 404, "unknown_card", exc)

    @app.exception_handler(NoUpcomingMatchError)
    async def no_match_handler(request: Request, exc: NoUpcomingMatchError) -> JSONResponse:
        return _error(request, 404, "no_upcoming_match", exc)

    @app.exception_handler(ProviderUnavailableError)
    async def provider_handler(request: Request, exc: ProviderUnavailableError) -> JSONResponse:
        logger.warning("provider_unavailable", provider=exc.provider, path=request.url.path, error=str(exc))
        return _error(request, 503, "provider_unavailable", exc)


def setup_middleware(app: FastAPI) -> None:
    """Apply all middleware to the FastAPI app in the correct order."""
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    setup_exception_handlers(app)
