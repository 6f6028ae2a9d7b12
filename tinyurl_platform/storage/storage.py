"""
Storage module for TinyURL Platform (in-memory implementation).

Responsibilities:
    - Save url mappings and assign identities
    - Enforce uniqueness of short codes
    - Track hit counts with atomic increments
    - Provide lookups by code and by long URL

Design:
    - This is an in-memory reference implementation that satisfies the BaseStorage contract.
    - A single lock guards writes so the uniqueness check and the increment are race-free
      across threads (e.g. FastAPI's threadpool for sync routes).
    - Rows are stored and returned as copies; callers cannot mutate stored state.

LLM Prompt Example:
    "Explain how this in-memory storage can be swapped for a database-backed layer
     (Postgres/Redis) without changing the engine or API code, by adhering to a
     narrow, explicit BaseStorage interface."
"""

import itertools
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, Optional

from ..errors import Conflict
from ..models import UrlMapping
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.mappings = { code: UrlMapping(...) }
        """
        self.mappings: Dict[str, UrlMapping] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_active_by_long_url(self, long_url: str, now: datetime) -> Optional[UrlMapping]:
        """
        Return an active mapping for the exact long URL.

        No normalization is applied: "https://a.com" and "https://a.com/" are different URLs.
        """
        with self._lock:
            for mapping in self.mappings.values():
                if mapping.long_url == long_url and mapping.is_active(now):
                    return replace(mapping)
        return None

    def find_by_code(self, code: str) -> Optional[UrlMapping]:
        mapping = self.mappings.get(code)
        return replace(mapping) if mapping else None

    def exists_by_code(self, code: str) -> bool:
        return code in self.mappings

    def save(self, mapping: UrlMapping) -> UrlMapping:
        """
        Insert or update a mapping.

        Rules:
            - id is None -> insert; the code must be free, a fresh id is assigned.
            - id is set  -> update; the code must belong to that id.

        Raises:
            Conflict: If the code is used by a different mapping.
        """
        with self._lock:
            existing = self.mappings.get(mapping.code)
            if mapping.id is None:
                if existing is not None:
                    raise Conflict(mapping.code)
                stored = replace(mapping, id=next(self._ids))
            else:
                if existing is not None and existing.id != mapping.id:
                    raise Conflict(mapping.code)
                stored = replace(mapping)
            self.mappings[stored.code] = stored
            return replace(stored)

    def increment_hit_count(self, code: str) -> Optional[int]:
        with self._lock:
            mapping = self.mappings.get(code)
            if mapping is None:
                return None
            mapping.hit_count += 1
            return mapping.hit_count
