"""FastAPI application factory.

- Chat API: /api/v1/chat/*  (mounted by the composition root)
- healthz and metrics: system endpoints
- Uniform {error, message} error schema for domain and HTTP errors

Authentication is the host platform's concern and is not handled here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from stakemate.shared.errors import (
    NotFoundError,
    SessionLimitError,
    StakemateError,
    ValidationError,
)
from stakemate.shared.logging.error_handler import report_error

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str) -> dict[str, str]:
    return {"error": code, "message": message}


def create_app(
    *,
    cors_origins: list[str] | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        cors_origins: Allowed CORS origins for the chat UI. None or empty
            disables CORS.
        lifespan: Async context manager factory for startup/shutdown lifecycle.

    Returns:
        Configured FastAPI application without routers; the composition
        root mounts the chat router.
    """
    app = FastAPI(
        title="StakeMate Dialogue API",
        description="Rule-based investment assistant for infrastructure projects",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["Authorization", "Content-Type"],
        )

    # -- Error handlers --

    def _domain_response(request: Request, exc: StakemateError, status: int) -> JSONResponse:
        details = {k: v for k, v in vars(exc).items() if k != "code"}
        report = report_error(
            logger,
            exc,
            status=status,
            session_id=request.path_params.get("session_id"),
            details=details,
        )
        return JSONResponse(status_code=status, content=_error_body(report.code, report.message))

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _domain_response(request, exc, 404)

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _domain_response(request, exc, 422)

    @app.exception_handler(SessionLimitError)
    async def _session_limit(request: Request, exc: SessionLimitError) -> JSONResponse:
        return _domain_response(request, exc, 429)

    @app.exception_handler(StakemateError)
    async def _stakemate_error(request: Request, exc: StakemateError) -> JSONResponse:
        return _domain_response(request, exc, 500)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        message = str(first.get("msg", "Invalid request"))
        return JSONResponse(status_code=422, content=_error_body("VALIDATION", message))

    # Override Starlette default HTTP errors for the uniform schema
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        code_map = {
            404: "NOT_FOUND",
            405: "METHOD_NOT_ALLOWED",
        }
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                code_map.get(exc.status_code, "HTTP_ERROR"),
                exc.detail or f"HTTP {exc.status_code}",
            ),
        )

    # -- System routes --

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app
