from __future__ import annotations


class DocshareError(Exception):
    """Base error for every rejection raised by the docshare services.

    Each subclass pins the HTTP status a host application should answer with;
    ``docshare.api.errors`` renders them without further mapping.
    """

    status_code: int = 500

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.__name__
        super().__init__(self.detail)


class ValidationError(DocshareError):
    status_code = 406


class UnauthenticatedError(DocshareError):
    status_code = 401


class InvalidCredentialsError(UnauthenticatedError):
    pass


class NotFoundError(DocshareError):
    status_code = 404


class BadRequestError(DocshareError):
    status_code = 400


__all__ = [
    "DocshareError",
    "ValidationError",
    "UnauthenticatedError",
    "InvalidCredentialsError",
    "NotFoundError",
    "BadRequestError",
]
