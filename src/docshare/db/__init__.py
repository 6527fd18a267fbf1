from .base import ID_LENGTH, Base, ObjectIdMixin, TimestampMixin, is_valid_id, new_object_id
from .engine import DBEngine
from .health import db_healthcheck
from .models import Document, Role, User, Visibility
from .repository import Repository
from .settings import DBSettings, get_db_settings
from .uow import UnitOfWork

__all__ = [
    "ID_LENGTH",
    "Base",
    "ObjectIdMixin",
    "TimestampMixin",
    "is_valid_id",
    "new_object_id",
    "DBEngine",
    "db_healthcheck",
    "Document",
    "Role",
    "User",
    "Visibility",
    "Repository",
    "DBSettings",
    "get_db_settings",
    "UnitOfWork",
]
