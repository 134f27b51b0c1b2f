# products/services/locks.py

"""
PER-PRODUCT LOCKS (process-local)

Serializes ledger writes for the same product inside one process.
Across processes the row lock taken by select_for_update() does the job.

Registry rules:
- ids that cannot be a product pk are rejected before any entry is made
- an entry lives only while some caller holds or waits on it
"""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager

from django.conf import settings

from products.services.exceptions import PersistenceFailure, ReferenceNotFound


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


_registry_lock = threading.Lock()
_product_locks: dict[str, _LockEntry] = {}


def _lock_key(product_id) -> str:
    """Canonical key for product_id. Product pks are UUIDs."""
    if product_id in (None, ""):
        raise ReferenceNotFound("Product", product_id)
    try:
        return str(uuid.UUID(str(product_id)))
    except ValueError:
        raise ReferenceNotFound("Product", product_id)


def _checkout(key: str) -> _LockEntry:
    with _registry_lock:
        entry = _product_locks.get(key)
        if entry is None:
            entry = _LockEntry()
            _product_locks[key] = entry
        entry.users += 1
        return entry


def _checkin(key: str, entry: _LockEntry) -> None:
    with _registry_lock:
        entry.users -= 1
        if entry.users == 0 and _product_locks.get(key) is entry:
            del _product_locks[key]


@contextmanager
def product_lock(product_id, *, timeout: float | None = None):
    """
    Hold the lock for product_id for the duration of the block.

    Raises ReferenceNotFound for ids that cannot name a product, and
    PersistenceFailure when the lock is not acquired within timeout
    seconds (INVENTORY_LOCK_TIMEOUT by default).
    """
    if timeout is None:
        timeout = getattr(settings, "INVENTORY_LOCK_TIMEOUT", 10.0)

    key = _lock_key(product_id)
    entry = _checkout(key)
    try:
        if not entry.lock.acquire(timeout=timeout):
            raise PersistenceFailure(
                f"timed out waiting for stock lock on product {product_id}"
            )
        try:
            yield
        finally:
            entry.lock.release()
    finally:
        _checkin(key, entry)
