"""Store wiring for dependency injection."""

from __future__ import annotations

import logging

from inventory_relay.core.settings import settings
from inventory_relay.db.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    PrefixedKeyValueStore,
    RedisKeyValueStore,
)
from inventory_relay.db.time import Clock, utcnow

logger = logging.getLogger(__name__)

_store: KeyValueStore | None = None


def create_store() -> KeyValueStore:
    """Build the configured store backend."""
    store: KeyValueStore
    if settings.store_backend == "memory":
        logger.warning("Using in-memory store; data will not survive a restart")
        store = MemoryKeyValueStore()
    else:
        store = RedisKeyValueStore.from_url(settings.redis_url)
    if settings.store_key_prefix:
        store = PrefixedKeyValueStore(store, settings.store_key_prefix)
    return store


def get_store() -> KeyValueStore:
    """Return the process-wide store for dependency injection."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


def get_clock() -> Clock:
    """Return the clock used to timestamp and expire documents."""
    return utcnow
