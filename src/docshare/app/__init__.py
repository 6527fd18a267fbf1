from .core.env import CURRENT_ENVIRONMENT, IS_DEV, IS_LOCAL, IS_PROD, IS_TEST, Env, get_env, pick
from .core.logging import JsonFormatter, setup_logging
from .settings import AppSettings, get_app_settings

__all__ = [
    "CURRENT_ENVIRONMENT",
    "Env",
    "IS_DEV",
    "IS_LOCAL",
    "IS_PROD",
    "IS_TEST",
    "get_env",
    "pick",
    "JsonFormatter",
    "setup_logging",
    "AppSettings",
    "get_app_settings",
]
