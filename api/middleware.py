"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import ConfigurationError, InternalError, ServiceError

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors onto ``{"message": ...}`` JSON responses."""

    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError) -> JSONResponse:
        strict = request.app.state.settings.strict_status_codes
        message = exc.message
        if isinstance(exc, (InternalError, ConfigurationError)):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            message = InternalError.default_message
        return JSONResponse(status_code=exc.status_for(strict), content={"message": message})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        # locations only: error inputs may contain the password
        locations = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.debug("Invalid body on %s: %s", request.url.path, locations)
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"message": InternalError.default_message}
        if request.app.state.settings.expose_error_details:
            content["error"] = type(exc).__name__
        return JSONResponse(status_code=500, content=content)
