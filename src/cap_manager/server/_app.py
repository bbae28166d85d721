# pyright: reportAny=false, reportUnusedFunction=false
"""FastAPI application factory for the web UI and the HTTP API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cap_manager.exceptions import (
    CapManagerError,
    RequirementNotFoundError,
    RequirementValidationError,
)

from ._api import api_router
from ._pages import router as pages_router
from ._schemas import ErrorResponse
from ._session import ServerSession

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

LOCALHOST_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if loc and loc[0] == "path":
        return "Invalid requirement ID"
    field = ".".join(part for part in loc if part not in ("body", "query"))
    message = str(first.get("msg", "Invalid value"))
    return f"{field}: {message}" if field else message


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(RequirementValidationError)
    async def handle_validation(
        _request: Request, exc: RequirementValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequirementNotFoundError)
    async def handle_not_found(
        _request: Request, exc: RequirementNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(CapManagerError)
    async def handle_store_error(request: Request, exc: CapManagerError) -> JSONResponse:
        logger: FilteringBoundLogger | None = request.app.state.logger
        if logger is not None:
            logger.error(
                "request_failed",
                path=request.url.path,
                method=request.method,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to access requirements", str(exc)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger: FilteringBoundLogger | None = request.app.state.logger
        if logger is not None:
            logger.exception(
                "request_crashed",
                path=request.url.path,
                method=request.method,
                error_type=type(exc).__name__,
            )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc)
        )


def create_app(
    store_path: Path,
    *,
    session: ServerSession | None = None,
    logger: FilteringBoundLogger | None = None,
) -> FastAPI:
    """Create the FastAPI application serving one store file.

    Args:
        store_path: Store file read and written by the API.
        session: Inactivity session; its watchdog runs for the app's lifespan.
        logger: Optional logger for lifecycle events and server-side errors.

    Returns:
        The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        active: ServerSession | None = app.state.session
        if logger is not None:
            logger.info("server_started", store=str(store_path))
        if active is not None:
            active.ping()
            active.start()
        try:
            yield
        finally:
            if active is not None:
                await active.stop()
            if logger is not None:
                logger.info("server_stopped")

    app = FastAPI(
        title="cap-manager", docs_url=None, redoc_url="/api-docs", lifespan=lifespan
    )
    app.state.store_path = store_path
    app.state.session = session
    app.state.logger = logger

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    _register_exception_handlers(app)

    app.include_router(router=api_router)
    app.include_router(router=pages_router)
    return app
