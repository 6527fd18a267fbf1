from .document import AuthorRef, DocumentCreate, DocumentRead, DocumentSummary, DocumentUpdate
from .user import Deleted, LoginRequest, Session, UserCreate, UserRead, UserUpdate

__all__ = [
    "AuthorRef",
    "DocumentCreate",
    "DocumentRead",
    "DocumentSummary",
    "DocumentUpdate",
    "Deleted",
    "LoginRequest",
    "Session",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
