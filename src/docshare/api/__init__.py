from .errors import CatchAllExceptionMiddleware, register_error_handlers
from .integration import (
    add_docshare,
    bearer_header,
    get_document_service,
    get_engine,
    get_user_service,
)

__all__ = [
    "CatchAllExceptionMiddleware",
    "register_error_handlers",
    "add_docshare",
    "bearer_header",
    "get_document_service",
    "get_engine",
    "get_user_service",
]
