from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    jwt_secret: SecretStr
    jwt_algorithm: str = "HS256"
    jwt_lifetime_seconds: int = 60 * 60 * 24 * 7

    # bcrypt cost factor; tests drop it to the minimum of 4
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    model_config = SettingsConfigDict(env_prefix="AUTH_", env_file=".env", extra="ignore")


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings()
