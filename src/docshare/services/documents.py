from __future__ import annotations

import logging
from typing import Optional

from docshare.auth.tokens import TokenCodec
from docshare.db import DBEngine, Document, UnitOfWork, User, Visibility
from docshare.exceptions import NotFoundError
from docshare.schemas import DocumentCreate, DocumentRead, DocumentUpdate

from .common import authenticate, check_id, pull_favorites, read_document, read_documents

logger = logging.getLogger(__name__)

LIST_LIMIT = 10
MIN_QUERY_LENGTH = 3

# id breaks ties between rows written in the same instant
LIST_ORDER = (Document.created_at, Document.id)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DocumentService:
    """Document CRUD plus fork and favorite, keeping the user back-references in step.

    Every public method runs in its own ``UnitOfWork``: the document write and
    the matching change to the user's id lists commit or roll back together.
    """

    def __init__(self, engine: DBEngine, tokens: TokenCodec):
        self._engine = engine
        self._tokens = tokens

    async def create(self, data: DocumentCreate) -> DocumentRead:
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).get(data.author)
            if user is None:
                raise NotFoundError("User not found")
            doc = await uow.repo(Document).create(**data.model_dump())
            user.my_documents.append(doc.id)
            logger.info("document created", extra={"document_id": doc.id, "user_id": user.id})
            return await read_document(uow, doc)

    async def fork(self, document_id: str, authorization: Optional[str]) -> DocumentRead:
        check_id(document_id)
        user_id = authenticate(self._tokens, authorization)
        async with UnitOfWork(self._engine) as uow:
            base, user = await self._load_pair(uow, document_id, user_id)
            doc = await uow.repo(Document).create(
                title=base.title,
                content=base.content,
                keywords=list(base.keywords),
                author=user.id,
                fork=base.id,
                visibility=Visibility.PUBLIC,
            )
            user.my_documents.append(doc.id)
            logger.info("document %s forked as %s", base.id, doc.id, extra={"user_id": user.id})
            return await read_document(uow, doc)

    async def add_favorite(self, document_id: str, authorization: Optional[str]) -> DocumentRead:
        check_id(document_id)
        user_id = authenticate(self._tokens, authorization)
        async with UnitOfWork(self._engine) as uow:
            doc, user = await self._load_pair(uow, document_id, user_id)
            if doc.id not in user.my_favs:
                user.my_favs.append(doc.id)
            return await read_document(uow, doc)

    async def find_all(self) -> list[DocumentRead]:
        async with UnitOfWork(self._engine) as uow:
            docs = await uow.repo(Document).list(order_by=LIST_ORDER, limit=LIST_LIMIT)
            return await read_documents(uow, docs)

    async def search(self, query: str, offset: int = 0, limit: int = LIST_LIMIT) -> Optional[list[DocumentRead]]:
        """Case-insensitive title match; queries under three characters yield ``None``."""
        if len(query) < MIN_QUERY_LENGTH:
            return None
        pattern = f"%{_escape_like(query)}%"
        # a non-positive limit means no limit
        limit = limit if limit and limit > 0 else None
        offset = max(offset or 0, 0)
        async with UnitOfWork(self._engine) as uow:
            docs = await uow.repo(Document).list(
                filters=[Document.title.ilike(pattern, escape="\\")],
                order_by=LIST_ORDER,
                limit=limit,
                offset=offset,
            )
            return await read_documents(uow, docs)

    async def find_one(self, document_id: str) -> DocumentRead:
        check_id(document_id)
        async with UnitOfWork(self._engine) as uow:
            doc = await uow.repo(Document).get(document_id)
            if doc is None:
                raise NotFoundError("Document not found")
            return await read_document(uow, doc)

    async def update(self, document_id: str, data: DocumentUpdate) -> DocumentRead:
        check_id(document_id)
        async with UnitOfWork(self._engine) as uow:
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            doc = await uow.repo(Document).update(document_id, **changes)
            if doc is None:
                raise NotFoundError("Document not found")
            return await read_document(uow, doc)

    async def remove(self, document_id: str) -> DocumentRead:
        check_id(document_id)
        async with UnitOfWork(self._engine) as uow:
            docs = uow.repo(Document)
            doc = await docs.get(document_id)
            if doc is None:
                raise NotFoundError("Document not found")
            deleted = await read_document(uow, doc)

            author = await uow.repo(User).get(doc.author)
            if author is not None:
                author.my_documents = [i for i in author.my_documents if i != doc.id]
            else:
                logger.warning(
                    "author %s missing while deleting document", doc.author, extra={"document_id": doc.id}
                )
            await pull_favorites(uow, [doc.id])
            await docs.delete(doc.id)
            logger.info("document deleted", extra={"document_id": doc.id})
            return deleted

    async def _load_pair(self, uow: UnitOfWork, document_id: str, user_id: str) -> tuple[Document, User]:
        doc = await uow.repo(Document).get(document_id)
        user = await uow.repo(User).get(user_id)
        if doc is None:
            raise NotFoundError("Document not found")
        if user is None:
            raise NotFoundError("User not found")
        return doc, user
