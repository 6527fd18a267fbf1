"""Checks and read-model assembly shared by the document and user services."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from sqlalchemy import String, cast, or_, select

from docshare.auth.tokens import Invalid, TokenCodec, strip_bearer
from docshare.db import Document, UnitOfWork, User, is_valid_id
from docshare.exceptions import UnauthenticatedError, ValidationError
from docshare.schemas import AuthorRef, DocumentRead, DocumentSummary, UserRead

logger = logging.getLogger(__name__)


def check_id(value: str) -> None:
    if not is_valid_id(value):
        raise ValidationError("ID format not valid")


def authenticate(tokens: TokenCodec, authorization: Optional[str]) -> str:
    """Resolve an ``Authorization`` header to the requesting user's id."""
    if not authorization:
        raise UnauthenticatedError("User not identified")
    result = tokens.decode_token(strip_bearer(authorization))
    if isinstance(result, Invalid):
        logger.debug("rejected %s token", result.reason)
        if result.reason == "expired":
            raise UnauthenticatedError("Session expired")
        raise UnauthenticatedError("Token invalid")
    return result.user_id


# ------------------------------ population ------------------------------------


def _document_read(doc: Document, author: Optional[User]) -> DocumentRead:
    summary = DocumentSummary.model_validate(doc)
    ref = AuthorRef(id=author.id, name=author.name) if author is not None else None
    return DocumentRead(**summary.model_dump(), author=ref)


async def read_documents(uow: UnitOfWork, docs: Sequence[Document]) -> list[DocumentRead]:
    authors = await uow.repo(User).get_many({d.author for d in docs})
    by_id = {a.id: a for a in authors}
    return [_document_read(d, by_id.get(d.author)) for d in docs]


async def read_document(uow: UnitOfWork, doc: Document) -> DocumentRead:
    return (await read_documents(uow, [doc]))[0]


async def read_user(uow: UnitOfWork, user: User) -> UserRead:
    docs = uow.repo(Document)
    owned = await docs.get_many(user.my_documents)
    favs = await read_documents(uow, await docs.get_many(user.my_favs))
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        my_documents=[DocumentSummary.model_validate(d) for d in owned],
        my_favs=favs,
    )


# ------------------------------ back-references -------------------------------


async def pull_favorites(uow: UnitOfWork, document_ids: Iterable[str]) -> int:
    """Remove the given ids from every user's favorites list; returns users touched."""
    ids = set(document_ids)
    if not ids:
        return 0
    assert uow.session is not None
    # coarse text match on the serialized list, refined in Python below
    serialized = cast(User.my_favs, String)
    stmt = select(User).where(or_(*[serialized.contains(i) for i in ids]))
    touched = 0
    for user in (await uow.session.execute(stmt)).scalars():
        kept = [i for i in user.my_favs if i not in ids]
        if len(kept) != len(user.my_favs):
            user.my_favs = kept
            touched += 1
    await uow.session.flush()
    return touched
