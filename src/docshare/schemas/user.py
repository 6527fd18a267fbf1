from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from docshare.db.models import Role

from .document import DocumentRead, DocumentSummary


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    role: Role | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    role: Role
    my_documents: list[DocumentSummary] = Field(default_factory=list)
    my_favs: list[DocumentRead] = Field(default_factory=list)


class Session(BaseModel):
    user: UserRead
    token: str


class Deleted(BaseModel):
    deleted: bool = True
