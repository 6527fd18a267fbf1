from __future__ import annotations

import pytest

from docshare.auth import Decoded, TokenCodec
from docshare.db import Document, Role, UnitOfWork, User
from docshare.exceptions import (
    BadRequestError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from docshare.schemas import Deleted, LoginRequest, UserCreate, UserUpdate
from docshare.services import DocumentService, UserService


class TestCreate:
    @pytest.mark.asyncio
    async def test_returns_user_and_token(self, user_service: UserService, tokens: TokenCodec):
        session = await user_service.create(UserCreate(name="a", email="a@a.com", password="p"))

        assert session.user.email == "a@a.com"
        assert session.user.role == Role.USER
        assert session.user.my_documents == []
        assert session.user.my_favs == []
        assert session.token
        assert tokens.decode_token(session.token) == Decoded(session.user.id)

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, user_service: UserService, engine):
        session = await user_service.create(UserCreate(name="a", email="a@a.com", password="p"))
        async with UnitOfWork(engine) as uow:
            stored = await uow.repo(User).get(session.user.id)
        assert stored.password != "p"
        assert stored.password.startswith("$2")

    @pytest.mark.asyncio
    async def test_duplicate_email_is_bad_request(self, user_service: UserService, register):
        await register("a", "a@a.com")
        with pytest.raises(BadRequestError, match="Validation error"):
            await user_service.create(UserCreate(name="b", email="a@a.com", password="p"))

    @pytest.mark.asyncio
    async def test_ids_are_24_characters(self, register):
        session = await register()
        assert len(session.user.id) == 24


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_populates_documents(self, user_service: UserService, register, write_document):
        session = await register("a", "a@a.com", "p")
        doc = await write_document(session.user.id, "Mine")

        result = await user_service.login(LoginRequest(email="a@a.com", password="p"))

        assert result.token
        assert [d.id for d in result.user.my_documents] == [doc.id]
        assert result.user.my_documents[0].title == "Mine"

    @pytest.mark.asyncio
    async def test_wrong_password(self, user_service: UserService, register):
        await register("a", "a@a.com", "p")
        with pytest.raises(InvalidCredentialsError, match="Login data incorrect") as exc:
            await user_service.login(LoginRequest(email="a@a.com", password="nope"))
        assert isinstance(exc.value, UnauthenticatedError)
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_email(self, user_service: UserService):
        with pytest.raises(NotFoundError, match="User does not exist"):
            await user_service.login(LoginRequest(email="ghost@a.com", password="p"))


class TestLoginWithToken:
    @pytest.mark.asyncio
    async def test_reissues_token_for_same_user(self, user_service: UserService, tokens: TokenCodec, register):
        session = await register()
        refreshed = await user_service.login_with_token(f"Bearer {session.token}")
        assert refreshed.user.id == session.user.id
        assert tokens.decode_token(refreshed.token) == Decoded(session.user.id)

    @pytest.mark.asyncio
    async def test_missing_token(self, user_service: UserService):
        with pytest.raises(UnauthenticatedError, match="User not identified"):
            await user_service.login_with_token(None)

    @pytest.mark.asyncio
    async def test_expired_token(self, user_service: UserService, expired_tokens: TokenCodec, register):
        session = await register()
        with pytest.raises(UnauthenticatedError, match="Session expired"):
            await user_service.login_with_token(f"Bearer {expired_tokens.create_token(session.user.id)}")

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, user_service: UserService, register):
        session = await register()
        await user_service.remove(session.user.id)
        with pytest.raises(NotFoundError, match="User not found"):
            await user_service.login_with_token(f"Bearer {session.token}")


class TestFind:
    @pytest.mark.asyncio
    async def test_find_all(self, user_service: UserService, register):
        await register("a")
        await register("b")
        assert sorted(u.name for u in await user_service.find_all()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_find_one(self, user_service: UserService, register):
        session = await register("a")
        found = await user_service.find_one(session.user.id)
        assert found.email == "a@mail.com"

    @pytest.mark.asyncio
    async def test_find_one_short_id(self, user_service: UserService):
        with pytest.raises(ValidationError):
            await user_service.find_one("123")

    @pytest.mark.asyncio
    async def test_find_one_missing(self, user_service: UserService, missing_id: str):
        with pytest.raises(NotFoundError):
            await user_service.find_one(missing_id)

    @pytest.mark.asyncio
    async def test_read_model_has_no_password(self, user_service: UserService, register):
        session = await register()
        assert "password" not in (await user_service.find_one(session.user.id)).model_dump()


class TestUpdate:
    @pytest.mark.asyncio
    async def test_updates_own_fields(self, user_service: UserService, register):
        session = await register("a")
        updated = await user_service.update(f"Bearer {session.token}", UserUpdate(name="renamed"))
        assert updated.name == "renamed"
        assert updated.email == "a@mail.com"

    @pytest.mark.asyncio
    async def test_admin_role_is_downgraded(self, user_service: UserService, register):
        session = await register()
        updated = await user_service.update(f"Bearer {session.token}", UserUpdate(role=Role.ADMIN))
        assert updated.role == Role.USER
        assert (await user_service.find_one(session.user.id)).role == Role.USER

    @pytest.mark.asyncio
    async def test_new_password_is_hashed(self, user_service: UserService, register):
        session = await register("a", "a@a.com", "old")
        await user_service.update(f"Bearer {session.token}", UserUpdate(password="new"))

        assert (await user_service.login(LoginRequest(email="a@a.com", password="new"))).token
        with pytest.raises(InvalidCredentialsError):
            await user_service.login(LoginRequest(email="a@a.com", password="old"))

    @pytest.mark.asyncio
    async def test_taken_email_is_bad_request(self, user_service: UserService, register):
        await register("a", "a@a.com")
        session = await register("b", "b@a.com")
        with pytest.raises(BadRequestError):
            await user_service.update(f"Bearer {session.token}", UserUpdate(email="a@a.com"))
        assert (await user_service.find_one(session.user.id)).email == "b@a.com"

    @pytest.mark.asyncio
    async def test_invalid_token_changes_nothing(self, user_service: UserService, register):
        session = await register("a")
        with pytest.raises(UnauthenticatedError):
            await user_service.update("Bearer broken", UserUpdate(name="hijacked"))
        assert (await user_service.find_one(session.user.id)).name == "a"

    @pytest.mark.asyncio
    async def test_deleted_user(self, user_service: UserService, register):
        session = await register()
        await user_service.remove(session.user.id)
        with pytest.raises(NotFoundError):
            await user_service.update(f"Bearer {session.token}", UserUpdate(name="x"))


class TestRemove:
    @pytest.mark.asyncio
    async def test_cascades_authored_documents(
        self, user_service: UserService, document_service: DocumentService, register, write_document, engine
    ):
        author = await register("a")
        other = await register("b")
        gone = [await write_document(author.user.id, f"doc {i}") for i in range(3)]
        kept = await write_document(other.user.id, "survivor")
        await document_service.add_favorite(gone[0].id, f"Bearer {other.token}")
        await document_service.add_favorite(kept.id, f"Bearer {other.token}")

        deleted = await user_service.remove(author.user.id)

        assert deleted.id == author.user.id
        assert len(deleted.my_documents) == 3
        async with UnitOfWork(engine) as uow:
            assert await uow.repo(Document).count(where={"author": author.user.id}) == 0
            assert await uow.repo(Document).get(kept.id) is not None
            assert await uow.repo(User).get(author.user.id) is None
        remaining = await user_service.find_one(other.user.id)
        assert [d.id for d in remaining.my_favs] == [kept.id]

    @pytest.mark.asyncio
    async def test_short_id(self, user_service: UserService):
        with pytest.raises(ValidationError):
            await user_service.remove("abc")

    @pytest.mark.asyncio
    async def test_missing_user(self, user_service: UserService, missing_id: str):
        with pytest.raises(NotFoundError):
            await user_service.remove(missing_id)

    @pytest.mark.asyncio
    async def test_remove_self(self, user_service: UserService, register, write_document, engine):
        session = await register()
        await write_document(session.user.id)

        assert await user_service.remove_self(f"Bearer {session.token}") == Deleted(deleted=True)

        async with UnitOfWork(engine) as uow:
            assert await uow.repo(User).count() == 0
            assert await uow.repo(Document).count() == 0

    @pytest.mark.asyncio
    async def test_remove_self_requires_token(self, user_service: UserService, register, engine):
        await register()
        with pytest.raises(UnauthenticatedError):
            await user_service.remove_self(None)
        async with UnitOfWork(engine) as uow:
            assert await uow.repo(User).count() == 1


class TestCreateAdmin:
    @pytest.mark.asyncio
    async def test_creates_admin(self, user_service: UserService):
        admin = await user_service.create_admin(UserCreate(name="root", email="root@a.com", password="p"))
        assert admin.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_promotes_existing_account(self, user_service: UserService, register):
        session = await register("a", "a@a.com")
        admin = await user_service.create_admin(UserCreate(name="ignored", email="a@a.com", password="other"))
        assert admin.id == session.user.id
        assert admin.name == "a"
        assert (await user_service.find_one(session.user.id)).role == Role.ADMIN
