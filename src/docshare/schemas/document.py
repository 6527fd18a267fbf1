from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docshare.db.models import Visibility

# ------------------------------ Inputs ----------------------------------------


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""
    keywords: list[str] = Field(default_factory=list)
    author: str = Field(..., description="Id of the authoring user")
    fork: str | None = Field(None, description="Id of the document this one was forked from")
    visibility: Visibility = Visibility.PUBLIC


class DocumentUpdate(BaseModel):
    """Partial update; authorship and fork lineage are not editable."""

    title: str | None = Field(None, min_length=1)
    content: str | None = None
    keywords: list[str] | None = None
    visibility: Visibility | None = None


# ------------------------------ Outputs ---------------------------------------


class AuthorRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str


class DocumentSummary(BaseModel):
    """A document without its author, as listed under its author's record."""

    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    content: str
    keywords: list[str] = Field(default_factory=list)
    fork: str | None = None
    visibility: Visibility
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentRead(DocumentSummary):
    author: AuthorRef | None = None
