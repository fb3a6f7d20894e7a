"""Error types raised by the Azure DevOps history client.

Kept in their own module so callers can catch specific failures without
importing the HTTP layer.
"""
from typing import Optional


class AdoError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(AdoError, ValueError):
    """Required or mutually exclusive parameters were violated."""


class NotFoundError(AdoError, FileNotFoundError):
    """A referenced token file does not exist or is not a regular file."""


class DecryptError(AdoError):
    """A token file could not be decrypted for this user on this machine."""


AuthError = DecryptError


class RequestError(AdoError):
    """The remote call failed at the transport level or returned non-2xx."""

    def __init__(
            self,
            message: str,
            *,
            status_code: Optional[int] = None,
            body: Optional[str] = None,
            method: str = "",
            uri: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.method = method
        self.uri = uri
