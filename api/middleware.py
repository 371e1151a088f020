"""
Global middleware and exception handlers.

Every ``DashboardError`` that escapes a route becomes ``{"error": message}``
with the error's HTTP status; request validation failures become 422 with
the first message in ``error`` and the full list in ``detail``.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from connectors.errors import DashboardError

logger = logging.getLogger(__name__)


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
    return JSONResponse(
        status_code=422,
        content={"error": message, "detail": jsonable_errors(errors)},
    )


def jsonable_errors(errors: list) -> list:
    """Keep only the JSON-safe parts of pydantic error dicts."""
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors]


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware and exception handlers."""

    app.add_exception_handler(DashboardError, dashboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
