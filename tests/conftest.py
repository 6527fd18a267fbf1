"""
Root conftest.py for docshare tests.

This file provides:
1. Environment defaults applied before docshare is imported
2. Database fixtures (in-memory SQLite through aiosqlite)
3. Auth fixtures (settings, token codec, password hasher)
4. Service fixtures and small helpers for registering users and documents
"""

from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

import pytest
import pytest_asyncio

from docshare.auth import AuthSettings, PasswordHasher, TokenCodec
from docshare.db import DBEngine, DBSettings
from docshare.schemas import DocumentCreate, UserCreate
from docshare.services import DocumentService, UserService

TEST_SECRET = "docshare-test-secret-" * 3


def pytest_configure(config):
    config.addinivalue_line("markers", "security: Authentication and authorization tests")


def pytest_collection_modifyitems(config, items):
    """Tag the auth tests so `-m security` selects them."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/unit/auth/" in norm or "auth" in item.name:
            item.add_marker(pytest.mark.security)


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def auth_settings() -> AuthSettings:
    # lowest bcrypt cost keeps the suite fast
    return AuthSettings(jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def tokens(auth_settings: AuthSettings) -> TokenCodec:
    return TokenCodec(auth_settings)


@pytest.fixture
def hasher(auth_settings: AuthSettings) -> PasswordHasher:
    return PasswordHasher(auth_settings)


@pytest.fixture
def expired_tokens() -> TokenCodec:
    """A codec whose tokens are already past their expiry when issued."""
    return TokenCodec(AuthSettings(jwt_secret=TEST_SECRET, jwt_lifetime_seconds=-60, bcrypt_rounds=4))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def engine():
    db = DBEngine(DBSettings(database_url="sqlite+aiosqlite:///:memory:"))
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def user_service(engine: DBEngine, tokens: TokenCodec, hasher: PasswordHasher) -> UserService:
    return UserService(engine, tokens, hasher)


@pytest.fixture
def document_service(engine: DBEngine, tokens: TokenCodec) -> DocumentService:
    return DocumentService(engine, tokens)


@pytest.fixture
def register(user_service: UserService):
    """Register a user and return the session (user + token)."""

    async def _register(name: str = "alice", email: str | None = None, password: str = "secret"):
        email = email or f"{name}@mail.com"
        return await user_service.create(UserCreate(name=name, email=email, password=password))

    return _register


@pytest.fixture
def write_document(document_service: DocumentService):
    """Create a document for an author id."""

    async def _write(author: str, title: str = "Notes", **fields):
        return await document_service.create(DocumentCreate(author=author, title=title, **fields))

    return _write


@pytest.fixture
def missing_id() -> str:
    """Well-formed id that no record carries."""
    return "f" * 24
