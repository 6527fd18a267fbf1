from __future__ import annotations

import asyncio
from typing import Optional

import typer

from docshare.app.core.logging import setup_logging
from docshare.auth import PasswordHasher, TokenCodec, get_auth_settings
from docshare.db import DBEngine, get_db_settings
from docshare.exceptions import DocshareError
from docshare.schemas import UserCreate
from docshare.services import UserService

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _engine(database_url: Optional[str]) -> DBEngine:
    return DBEngine(get_db_settings(database_url=database_url))


async def _init_db(engine: DBEngine) -> None:
    try:
        await engine.create_all()
    finally:
        await engine.dispose()


async def _drop_db(engine: DBEngine) -> None:
    try:
        await engine.drop_all()
    finally:
        await engine.dispose()


async def _create_admin(engine: DBEngine, data: UserCreate):
    settings = get_auth_settings()
    service = UserService(engine, TokenCodec(settings), PasswordHasher(settings))
    try:
        await engine.create_all()
        return await service.create_admin(data)
    finally:
        await engine.dispose()


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL")):
    setup_logging(level=log_level)


@app.command("init-db")
def init_db(
        database_url: Optional[str] = typer.Option(None, help="Override DATABASE_URL; defaults to env"),
):
    """Create the users and documents tables if they do not exist."""
    asyncio.run(_init_db(_engine(database_url)))
    typer.echo("Tables created.")


@app.command("drop-db")
def drop_db(
        database_url: Optional[str] = typer.Option(None, help="Override DATABASE_URL; defaults to env"),
        yes: bool = typer.Option(False, "--yes", help="Confirm dropping every table"),
):
    if not yes:
        typer.echo("Refusing to drop tables without --yes.", err=True)
        raise typer.Exit(code=1)
    asyncio.run(_drop_db(_engine(database_url)))
    typer.echo("Tables dropped.")


@app.command("create-admin")
def create_admin(
        name: str = typer.Option(..., help="Display name"),
        email: str = typer.Option(..., help="Login email; an existing account is promoted"),
        password: str = typer.Option(..., prompt=True, hide_input=True, help="Password for a new account"),
        database_url: Optional[str] = typer.Option(None, help="Override DATABASE_URL; defaults to env"),
):
    """The only way to grant the admin role."""
    try:
        data = UserCreate(name=name, email=email, password=password)
    except ValueError as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=2)
    try:
        user = asyncio.run(_create_admin(_engine(database_url), data))
    except DocshareError as exc:
        typer.echo(f"{type(exc).__name__}: {exc.detail}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Admin ready: {user.email} ({user.id})")


if __name__ == "__main__":
    app()
