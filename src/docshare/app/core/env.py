from __future__ import annotations

import os
import warnings
from enum import StrEnum
from functools import cache


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


ALIASES: dict[str, Env] = {
    "development": Env.DEV,
    "testing": Env.TEST,
    "ci": Env.TEST,
    "production": Env.PROD,
}


def _parse_env(raw: str | None) -> Env | None:
    if not raw:
        return None
    value = raw.strip().lower()
    try:
        return Env(value)
    except ValueError:
        return ALIASES.get(value)


@cache
def get_env() -> Env:
    """
    Resolve the running environment from ``APP_ENV`` (falling back to
    ``ENVIRONMENT``). Unknown values degrade to ``local`` with a warning.
    """
    raw = os.getenv("APP_ENV") or os.getenv("ENVIRONMENT")
    env = _parse_env(raw)
    if env is None:
        if raw:
            warnings.warn(
                f"Unrecognized environment '{raw}', defaulting to 'local'.",
                RuntimeWarning,
                stacklevel=2,
            )
        env = Env.LOCAL
    return env


CURRENT_ENVIRONMENT: Env = get_env()
IS_LOCAL = CURRENT_ENVIRONMENT is Env.LOCAL
IS_DEV = CURRENT_ENVIRONMENT is Env.DEV
IS_TEST = CURRENT_ENVIRONMENT is Env.TEST
IS_PROD = CURRENT_ENVIRONMENT is Env.PROD


def pick(*, prod, nonprod, dev=None, test=None, local=None):
    """
    Choose a value for the active environment.

    Example:
        rounds = pick(prod=12, nonprod=12, test=4)
    """
    overrides = {Env.DEV: dev, Env.TEST: test, Env.LOCAL: local}
    env = get_env()
    if env is Env.PROD:
        return prod
    chosen = overrides.get(env)
    return nonprod if chosen is None else chosen
