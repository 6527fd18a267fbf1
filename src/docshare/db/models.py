from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_LENGTH, Base, ObjectIdMixin, TimestampMixin


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


def _id_list():
    # in-place append/remove must mark the row dirty
    return mapped_column(MutableList.as_mutable(JSON), default=list, nullable=False)


class User(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
    )
    my_documents: Mapped[list[str]] = _id_list()
    my_favs: Mapped[list[str]] = _id_list()


class Document(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(String(255), index=True)
    content: Mapped[str] = mapped_column(Text, default="")
    keywords: Mapped[list[str]] = mapped_column(MutableList.as_mutable(JSON), default=list, nullable=False)
    # No FK cascade: authored documents are removed by the user service itself
    author: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    fork: Mapped[Optional[str]] = mapped_column(String(ID_LENGTH), nullable=True)
    visibility: Mapped[Visibility] = mapped_column(
        SAEnum(Visibility, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=Visibility.PUBLIC,
    )
