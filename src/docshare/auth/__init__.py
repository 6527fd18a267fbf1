from .passwords import PasswordHasher
from .settings import AuthSettings, get_auth_settings
from .tokens import Decoded, DecodeResult, Invalid, TokenCodec, strip_bearer

__all__ = [
    "AuthSettings",
    "get_auth_settings",
    "PasswordHasher",
    "TokenCodec",
    "Decoded",
    "Invalid",
    "DecodeResult",
    "strip_bearer",
]
