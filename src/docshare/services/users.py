from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from docshare.auth.passwords import PasswordHasher
from docshare.auth.tokens import TokenCodec
from docshare.db import DBEngine, Document, Role, UnitOfWork, User
from docshare.exceptions import BadRequestError, InvalidCredentialsError, NotFoundError
from docshare.schemas import Deleted, LoginRequest, Session, UserCreate, UserRead, UserUpdate

from .common import authenticate, check_id, pull_favorites, read_user

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, engine: DBEngine, tokens: TokenCodec, hasher: PasswordHasher):
        self._engine = engine
        self._tokens = tokens
        self._hasher = hasher

    async def create(self, data: UserCreate) -> Session:
        """Register a user (always with the ``user`` role) and open a session."""
        async with UnitOfWork(self._engine) as uow:
            try:
                user = await uow.repo(User).create(
                    name=data.name,
                    email=data.email,
                    password=self._hasher.encrypt(data.password),
                    role=Role.USER,
                )
            except (IntegrityError, ValueError) as exc:
                logger.debug("user registration rejected: %s", exc)
                raise BadRequestError("Validation error") from exc
            logger.info("user registered", extra={"user_id": user.id})
            return Session(user=await read_user(uow, user), token=self._tokens.create_token(user.id))

    async def login(self, data: LoginRequest) -> Session:
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).find_one(email=data.email)
            if user is None:
                raise NotFoundError("User does not exist")
            if not self._hasher.compare(data.password, user.password):
                raise InvalidCredentialsError("Login data incorrect")
            return Session(user=await read_user(uow, user), token=self._tokens.create_token(user.id))

    async def login_with_token(self, authorization: Optional[str]) -> Session:
        user_id = authenticate(self._tokens, authorization)
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            # refreshed token, new expiry
            return Session(user=await read_user(uow, user), token=self._tokens.create_token(user.id))

    async def find_all(self) -> list[UserRead]:
        async with UnitOfWork(self._engine) as uow:
            return [await read_user(uow, u) for u in await uow.repo(User).list()]

    async def find_one(self, user_id: str) -> UserRead:
        check_id(user_id)
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            return await read_user(uow, user)

    async def update(self, authorization: Optional[str], data: UserUpdate) -> UserRead:
        """Update the requesting user; a request for the admin role is stored as ``user``."""
        user_id = authenticate(self._tokens, authorization)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in changes:
            changes["password"] = self._hasher.encrypt(changes["password"])
        if changes.get("role") == Role.ADMIN:
            logger.warning("self-promotion to admin refused", extra={"user_id": user_id})
            changes["role"] = Role.USER
        async with UnitOfWork(self._engine) as uow:
            try:
                user = await uow.repo(User).update(user_id, **changes)
            except IntegrityError as exc:
                raise BadRequestError("Validation error") from exc
            if user is None:
                raise NotFoundError("User not found")
            return await read_user(uow, user)

    async def remove(self, user_id: str) -> UserRead:
        """Administrative delete: the user and every document they authored."""
        check_id(user_id)
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            deleted = await read_user(uow, user)
            await self._delete_cascade(uow, user)
            return deleted

    async def remove_self(self, authorization: Optional[str]) -> Deleted:
        user_id = authenticate(self._tokens, authorization)
        async with UnitOfWork(self._engine) as uow:
            user = await uow.repo(User).get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            await self._delete_cascade(uow, user)
            return Deleted(deleted=True)

    async def create_admin(self, data: UserCreate) -> UserRead:
        """Create an admin account, or promote the existing account with that email."""
        async with UnitOfWork(self._engine) as uow:
            users = uow.repo(User)
            user = await users.find_one(email=data.email)
            if user is None:
                user = await users.create(
                    name=data.name,
                    email=data.email,
                    password=self._hasher.encrypt(data.password),
                    role=Role.ADMIN,
                )
            else:
                user.role = Role.ADMIN
            logger.info("admin account ready", extra={"user_id": user.id})
            return await read_user(uow, user)

    async def _delete_cascade(self, uow: UnitOfWork, user: User) -> None:
        docs = uow.repo(Document)
        authored = [d.id for d in await docs.list(where={"author": user.id})]
        await docs.delete_where(author=user.id)
        await pull_favorites(uow, authored)
        await uow.repo(User).delete(user.id)
        logger.info("user deleted with %d documents", len(authored), extra={"user_id": user.id})
