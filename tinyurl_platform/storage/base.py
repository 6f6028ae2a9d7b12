"""
Base storage interface for TinyURL Platform.

Purpose:
    Define a small, stable contract that multiple storage backends
    (in-memory, PostgreSQL) can implement without requiring changes
    to the shortening engine.

Contract highlights:
    - `save` must enforce uniqueness of `code` and raise `Conflict` instead of
      overwriting another mapping.
    - `increment_hit_count` must be atomic so concurrent resolutions of the same
      code never lose an increment.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.

LLM Prompt Example:
    "Show how a narrow, explicit storage interface enables dependency
    injection and easy backend swapping without touching service code."
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..models import UrlMapping


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def find_active_by_long_url(self, long_url: str, now: datetime) -> Optional[UrlMapping]:
        """
        Return a mapping for exactly `long_url` whose expiry is unset or after `now`.

        If several active mappings match, any one of them may be returned.

        LLM Prompt Example:
            "Show how an index on (long_url, expires_at) keeps this lookup cheap."
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_code(self, code: str) -> Optional[UrlMapping]:
        """Return the mapping for an exact code, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def exists_by_code(self, code: str) -> bool:
        """Return True if any mapping (active or expired) uses this code."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def save(self, mapping: UrlMapping) -> UrlMapping:
        """
        Insert a new mapping (id is None) or update an existing one.

        Returns:
            UrlMapping: The persisted mapping, with `id` assigned on insert.

        Raises:
            Conflict: If another mapping already uses `mapping.code`.

        LLM Prompt Example:
            "Design an insert path where a UNIQUE(code) constraint is the
            authoritative guard against concurrent allocation of one code."
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def increment_hit_count(self, code: str) -> Optional[int]:
        """
        Atomically add one to the hit count for `code`.

        Returns:
            Optional[int]: The new count, or None if the code does not exist.

        LLM Prompt Example:
            "Explain how to make increments atomic with Redis INCR or SQL UPDATE ... RETURNING."
        """
        raise NotImplementedError
