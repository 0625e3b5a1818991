"""Service portal ASGI application.

``create_app`` wires the browser-facing pieces: CORS for the public site
and dashboards, fixed response headers, the ``{"error": {...}}`` envelope
for failures, the ``/api/v1`` routes and ``/health``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from portal.api.v1.router import router as v1_router
from portal.core.config import settings
from portal.core.database import dispose_engine
from portal.core.errors import APIError
from portal.core.responses import ErrorDetail, ErrorResponse

logger = structlog.get_logger()

# Browser clients send Supabase-style headers along with the bearer token.
_CORS_ALLOWED_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-admin-key",
]

_CORS_ALLOWED_METHODS = ["GET", "POST", "PATCH", "OPTIONS"]

# Every response is JSON, so nothing may frame it or load resources.
_STATIC_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

# API bodies carry session tokens and customer contact details.
_API_HEADERS = {"Cache-Control": "no-store, max-age=0"}

# TLS terminates at the reverse proxy in production.
_PRODUCTION_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


def response_headers_for(path: str, environment: str) -> dict[str, str]:
    """Headers attached to a response for ``path`` in ``environment``."""
    headers = dict(_STATIC_HEADERS)
    if path.startswith("/api/"):
        headers.update(_API_HEADERS)
    if environment == "production":
        headers.update(_PRODUCTION_HEADERS)
    return headers


class ResponseHeadersMiddleware(BaseHTTPMiddleware):
    """Attach ``response_headers_for`` to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers.update(
            response_headers_for(request.url.path, settings.environment)
        )
        return response


def _error_json(
    status_code: int, code: str, message: str, details: Any = None
) -> JSONResponse:
    envelope = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details)
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Render a raised APIError with its own status and code."""
    return _error_json(exc.status_code, exc.code, exc.message, exc.details)


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body, path and query problems as 400 VALIDATION_ERROR.

    Each entry in ``details`` names the offending location and pydantic's
    message for it.
    """
    problems = [
        {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]
    return _error_json(400, "VALIDATION_ERROR", "Request validation failed", problems)


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unhandled and answer a generic 500."""
    logger.exception("unhandled_exception", exc_info=exc, path=request.url.path)
    return _error_json(500, "INTERNAL_ERROR", "An unexpected error occurred")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    """Build the portal application."""
    app = FastAPI(
        title="Service Portal API",
        version="1.0.0",
        description="Customer service requests, PM dashboard, and admin tools",
        lifespan=lifespan,
    )

    # Added last so CORS answers preflight requests before anything else.
    # No cookies are involved, so credentials stay off.
    app.add_middleware(ResponseHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=_CORS_ALLOWED_METHODS,
        allow_headers=_CORS_ALLOWED_HEADERS,
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Liveness check for the load balancer."""
        return {"status": "healthy"}

    return app


# uvicorn portal.main:app
app = create_app()
