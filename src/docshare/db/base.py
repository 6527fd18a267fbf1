from __future__ import annotations

import datetime as dt
import secrets

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID_LENGTH = 24


def new_object_id() -> str:
    """24 lowercase hex characters, the external identifier format."""
    return secrets.token_hex(ID_LENGTH // 2)


def is_valid_id(value: str | None) -> bool:
    return value is not None and len(value) == ID_LENGTH


class Base(DeclarativeBase):
    pass


class ObjectIdMixin:
    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_object_id)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TimestampMixin:
    # client-side defaults: values are on the instance right after flush, no refresh round-trip
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
