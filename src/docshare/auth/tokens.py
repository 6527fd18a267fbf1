"""Session token codec.

Tokens are HS256 (by default) JWTs carrying the user id under the ``id`` claim.
Decoding never raises: the outcome is resolved here into a tagged result so
callers branch on ``Decoded`` / ``Invalid`` instead of inspecting payloads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal, Union

import jwt

from .settings import AuthSettings

logger = logging.getLogger(__name__)

BEARER_PREFIX_LENGTH = len("Bearer ")


@dataclass(frozen=True)
class Decoded:
    user_id: str


@dataclass(frozen=True)
class Invalid:
    reason: Literal["expired", "malformed"]


DecodeResult = Union[Decoded, Invalid]


def strip_bearer(authorization: str) -> str:
    """Drop the scheme prefix; the scheme itself is not checked."""
    return authorization[BEARER_PREFIX_LENGTH:]


class TokenCodec:
    def __init__(self, settings: AuthSettings):
        self._secret = settings.jwt_secret.get_secret_value()
        self._algorithm = settings.jwt_algorithm
        self._lifetime = timedelta(seconds=settings.jwt_lifetime_seconds)

    def create_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {"id": user_id, "iat": now, "exp": now + self._lifetime}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, raw: str) -> DecodeResult:
        try:
            payload = jwt.decode(raw, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            return Invalid("expired")
        except jwt.PyJWTError as exc:
            logger.debug("token rejected: %s", exc)
            return Invalid("malformed")

        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            return Invalid("malformed")
        return Decoded(user_id)


__all__ = ["Decoded", "Invalid", "DecodeResult", "TokenCodec", "strip_bearer"]
