from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    name: str = "docshare"
    version: str = "0.1.0"

    model_config = SettingsConfigDict(
        env_prefix="APP_",  # APP_NAME, APP_VERSION
        extra="ignore",
    )


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    # None values fall through to the declared defaults
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
