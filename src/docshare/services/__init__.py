from .common import authenticate, check_id
from .documents import DocumentService
from .users import UserService

__all__ = ["DocumentService", "UserService", "authenticate", "check_id"]
