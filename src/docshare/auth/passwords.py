from __future__ import annotations

import bcrypt

from .settings import AuthSettings


class PasswordHasher:
    def __init__(self, settings: AuthSettings):
        self.rounds = settings.bcrypt_rounds

    def encrypt(self, plain: str) -> str:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def compare(self, plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("ascii"))
        except ValueError:
            # not a bcrypt hash
            return False


__all__ = ["PasswordHasher"]
