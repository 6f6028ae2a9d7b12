"""
Error taxonomy for TinyURL Platform.

Every failure the core reports derives from `ShortenerError`, so the transport
layer can map them to protocol status codes in one place:

    ExhaustedRetries -> 503  (no free code within the retry bound)
    Conflict         -> 503  (code uniqueness violated at save time)
    NotFound         -> 404
    Gone             -> 410  (code exists but has expired)

Persistence-layer transient failures (connectivity, timeouts) are not wrapped
and propagate as raised by the driver.
"""

from datetime import datetime
from typing import Optional

__all__ = ["ShortenerError", "ExhaustedRetries", "NotFound", "Gone", "Conflict"]


class ShortenerError(Exception):
    """Base class for all errors raised by the shortening core."""


class ExhaustedRetries(ShortenerError):
    """No unused code was found within the allowed number of attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Unable to generate unique code after {attempts} attempts")


class NotFound(ShortenerError):
    """No mapping exists for the requested code."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Short URL not found: {code}")


class Gone(ShortenerError):
    """A mapping exists for the code but it has expired."""

    def __init__(self, code: str, expires_at: Optional[datetime] = None):
        self.code = code
        self.expires_at = expires_at
        super().__init__(f"Short URL has expired: {code}")


class Conflict(ShortenerError):
    """Persistence rejected a write because the code is already taken."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Code already exists: {code}")
