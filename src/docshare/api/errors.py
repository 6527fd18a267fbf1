from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from docshare.exceptions import DocshareError

logger = logging.getLogger(__name__)


def _problem(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"{type(exc).__name__} on {request.url.path} (500): {exc}", exc_info=True)
            return _problem(500, type(exc).__name__, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DocshareError)
    async def _docshare_error(request: Request, exc: DocshareError) -> JSONResponse:
        level = logging.WARNING if exc.status_code >= 500 else logging.DEBUG
        logger.log(level, "%s on %s (%d): %s", type(exc).__name__, request.url.path, exc.status_code, exc.detail)
        return _problem(exc.status_code, type(exc).__name__, exc.detail)
