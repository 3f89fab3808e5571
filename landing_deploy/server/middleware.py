"""FastAPI middleware: request ids, request logging and error handling."""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from landing_deploy.api.exceptions import (
    APIError,
    DeploymentFailedError,
    DeploymentInProgressError,
    DeploymentNotFoundError,
    PageNotFoundError,
)
from landing_deploy.utils.logger import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response

logger = get_logger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Reads or generates X-Request-ID and logs one line per request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex[:12])

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 2)

        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms} ms)"
        )

        response.headers["X-Request-ID"] = request_id
        return response


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    content: dict = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def add_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers returning structured JSON errors."""

    @app.exception_handler(PageNotFoundError)
    async def page_not_found_handler(_request: Request, exc: PageNotFoundError) -> JSONResponse:
        return _error(404, "Page not found", exc.message)

    @app.exception_handler(DeploymentNotFoundError)
    async def deployment_not_found_handler(
        _request: Request, exc: DeploymentNotFoundError
    ) -> JSONResponse:
        return _error(404, exc.message)

    @app.exception_handler(DeploymentInProgressError)
    async def in_progress_handler(_request: Request, exc: DeploymentInProgressError) -> JSONResponse:
        return _error(409, exc.message)

    @app.exception_handler(DeploymentFailedError)
    async def deployment_failed_handler(
        _request: Request, exc: DeploymentFailedError
    ) -> JSONResponse:
        return _error(500, "Deployment failed", exc.message)

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return _error(502, "Upstream service error", str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
        return _error(400, "Bad request", str(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        return _error(500, "An unexpected error occurred")
