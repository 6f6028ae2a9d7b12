"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- TINYURL_STORAGE_BACKEND: "memory" (default) or "postgres"
- TINYURL_DB_DSN:          DSN string if backend=="postgres"
"""

import logging
import os
from typing import Optional

from tinyurl_platform.storage.base import BaseStorage
from tinyurl_platform.storage.storage import Storage

log = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads TINYURL_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend constructor. For postgres, use dsn="...".

    Raises
    ------
    ValueError
        If the backend is unknown, or postgres is selected without a DSN.
    """
    be = (backend or os.getenv("TINYURL_STORAGE_BACKEND", "memory")).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("TINYURL_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env TINYURL_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from tinyurl_platform.storage.db_storage import DBStorage

        return DBStorage(dsn=dsn)

    raise ValueError(f"Unknown storage backend: {be!r}")
