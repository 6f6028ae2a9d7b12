"""
Domain model for TinyURL Platform.

`UrlMapping` is the only persistent entity. Storage backends accept and return
instances of it; the engine and API never see backend-specific row shapes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UrlMapping:
    """
    A short code bound to a long URL.

    Attributes:
        code (str): Short code, unique across all mappings.
        long_url (str): Original URL, stored exactly as given.
        created_at (datetime): Creation time (UTC).
        expires_at (Optional[datetime]): Expiry time, or None for a permanent link.
        hit_count (int): Number of successful resolutions.
        id (Optional[int]): Identity assigned by storage on first save.

    Only `hit_count` changes after creation, and only through storage's
    `increment_hit_count`.
    """

    code: str
    long_url: str
    created_at: datetime = field(default_factory=utcnow)
    expires_at: Optional[datetime] = None
    hit_count: int = 0
    id: Optional[int] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        True when `expires_at` is set and not strictly in the future.

        A mapping whose expiry equals `now` is already expired.
        """
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return not self.is_expired(now)
