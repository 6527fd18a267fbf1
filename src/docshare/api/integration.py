from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, Request

from docshare.auth import AuthSettings, PasswordHasher, TokenCodec, get_auth_settings
from docshare.db import DBEngine, get_db_settings
from docshare.services import DocumentService, UserService

from .errors import CatchAllExceptionMiddleware, register_error_handlers

logger = logging.getLogger(__name__)


def add_docshare(
    app: FastAPI,
    *,
    engine: DBEngine | None = None,
    auth_settings: AuthSettings | None = None,
    catch_all: bool = True,
) -> DBEngine:
    """Attach the document store, the auth collaborators and the error handlers.

    Collaborators are stored on ``app.state`` immediately; the lifespan only
    disposes the engine on shutdown, composed with any lifespan already set.
    """
    engine = engine or DBEngine(get_db_settings())
    settings = auth_settings or get_auth_settings()
    tokens = TokenCodec(settings)
    hasher = PasswordHasher(settings)

    app.state.db_engine = engine
    app.state.document_service = DocumentService(engine, tokens)
    app.state.user_service = UserService(engine, tokens, hasher)

    existing = getattr(app.router, "lifespan_context", None)

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        url = engine.engine.url.render_as_string(hide_password=True)
        logger.info("docshare attached: url=%s", url)
        try:
            if existing:
                async with existing(_app):
                    yield
            else:
                yield
        finally:
            await engine.dispose()

    app.router.lifespan_context = composed_lifespan

    if catch_all:
        app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app)
    return engine


def get_engine(request: Request) -> DBEngine:
    return request.app.state.db_engine


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def bearer_header(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """The raw ``Authorization`` header; the services validate it."""
    return authorization
