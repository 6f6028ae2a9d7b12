"""
Unit tests for the in-memory Storage module.

Covers:
    - save (insert assigns ids, update, reject code collision)
    - find_by_code / exists_by_code (found & not found)
    - find_active_by_long_url (active, expired, exact match)
    - increment_hit_count (valid, missing, concurrent)
    - returned objects are copies
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from tinyurl_platform.errors import Conflict
from tinyurl_platform.models import UrlMapping
from tinyurl_platform.storage.storage import Storage

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _mapping(code="abc123", url="https://example.com", expires_at=None):
    return UrlMapping(code=code, long_url=url, created_at=T0, expires_at=expires_at)


def test_save_assigns_incrementing_ids(storage):
    a = storage.save(_mapping("a1"))
    b = storage.save(_mapping("b2", "https://b.com"))
    assert a.id == 1 and b.id == 2


def test_save_and_find_by_code(storage):
    storage.save(_mapping())
    found = storage.find_by_code("abc123")
    assert found is not None
    assert found.long_url == "https://example.com"
    assert found.hit_count == 0


def test_find_by_code_not_found(storage):
    assert storage.find_by_code("missing") is None


def test_exists_by_code(storage):
    storage.save(_mapping())
    assert storage.exists_by_code("abc123") is True
    assert storage.exists_by_code("zzz999") is False


def test_save_rejects_code_collision(storage):
    """Inserting a new mapping with a taken code raises Conflict and keeps the original."""
    storage.save(_mapping("abc123", "https://one.com"))
    with pytest.raises(Conflict) as ei:
        storage.save(_mapping("abc123", "https://two.com"))
    assert ei.value.code == "abc123"
    assert storage.find_by_code("abc123").long_url == "https://one.com"


def test_save_rejects_same_url_same_code_insert(storage):
    storage.save(_mapping())
    with pytest.raises(Conflict):
        storage.save(_mapping())


def test_save_update_existing(storage):
    saved = storage.save(_mapping())
    saved.hit_count = 5
    updated = storage.save(saved)
    assert updated.id == saved.id
    assert storage.find_by_code("abc123").hit_count == 5


def test_save_update_with_foreign_id_conflicts(storage):
    storage.save(_mapping("abc123"))
    intruder = _mapping("abc123", "https://other.com")
    intruder.id = 99
    with pytest.raises(Conflict):
        storage.save(intruder)


def test_find_active_by_long_url(storage):
    storage.save(_mapping("perm01", "https://x.com"))
    found = storage.find_active_by_long_url("https://x.com", T0)
    assert found is not None and found.code == "perm01"


def test_find_active_skips_expired(storage):
    storage.save(_mapping("old001", "https://x.com", expires_at=T0))
    assert storage.find_active_by_long_url("https://x.com", T0) is None
    storage.save(_mapping("new001", "https://x.com", expires_at=T0 + timedelta(days=1)))
    assert storage.find_active_by_long_url("https://x.com", T0).code == "new001"


def test_find_active_is_exact_match(storage):
    storage.save(_mapping("abc123", "https://x.com/"))
    assert storage.find_active_by_long_url("https://x.com", T0) is None


def test_increment_hit_count(storage):
    storage.save(_mapping())
    assert storage.increment_hit_count("abc123") == 1
    assert storage.increment_hit_count("abc123") == 2
    assert storage.find_by_code("abc123").hit_count == 2


def test_increment_hit_count_missing(storage):
    assert storage.increment_hit_count("nope") is None


def test_concurrent_increments_are_not_lost(storage):
    storage.save(_mapping())
    threads = [
        threading.Thread(target=lambda: [storage.increment_hit_count("abc123") for _ in range(200)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert storage.find_by_code("abc123").hit_count == 1600


def test_returned_mappings_are_copies(storage):
    saved = storage.save(_mapping())
    saved.hit_count = 42
    found = storage.find_by_code("abc123")
    found.hit_count = 7
    assert storage.find_by_code("abc123").hit_count == 0


def test_multiple_mappings_independent():
    fresh = Storage()
    fresh.save(_mapping("a1", "https://a.com"))
    fresh.save(_mapping("b2", "https://b.com"))
    assert fresh.find_by_code("a1").long_url == "https://a.com"
    assert fresh.find_by_code("b2").long_url == "https://b.com"
