# src/inventory_relay/db/store.py
"""Key-value store backends.

The service only needs single-key ``get``/``put``/``delete`` plus prefix
listing. There are no transactions and no compare-and-swap; multi-step
read-modify-write sequences in the services are last-write-wins.
"""

from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Any, Protocol

import redis

from inventory_relay.db.time import Clock, utcnow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing store cannot be reached or misbehaves."""


class KeyValueStore(Protocol):
    """Operations the services need from the backing store."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None: ...

    def delete(self, key: str) -> None: ...

    def list(self, prefix: str) -> list[str]: ...


def get_json(store: KeyValueStore, key: str) -> Any | None:
    """Return the decoded JSON document stored at ``key`` or None."""
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as err:
        raise StoreError(f"Corrupt document at {key}") from err


def put_json(store: KeyValueStore, key: str, value: Any, ttl_seconds: int | None = None) -> None:
    """Encode ``value`` as JSON and store it at ``key``."""
    store.put(key, json.dumps(value, separators=(",", ":")), ttl_seconds)


class MemoryKeyValueStore:
    """Process-local store with TTL eviction driven by an injectable clock.

    Expired keys are dropped lazily on access, mirroring a store whose TTL
    eviction is not observable until the next read.
    """

    def __init__(self, clock: Clock = utcnow) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}
        self._lock = Lock()

    def _now(self) -> float:
        return self._clock().timestamp()

    def _alive(self, key: str) -> tuple[str, float | None] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and expires_at <= self._now():
            self._data.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._alive(key)
            return entry[0] if entry else None

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise StoreError("TTL must be positive")
        with self._lock:
            expires_at = self._now() + ttl_seconds if ttl_seconds is not None else None
            self._data[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def list(self, prefix: str) -> list[str]:
        with self._lock:
            return sorted(
                key for key in list(self._data) if key.startswith(prefix) and self._alive(key)
            )

    def ttl(self, key: str) -> float | None:
        """Return remaining seconds for ``key``; None when absent or permanent."""
        with self._lock:
            entry = self._alive(key)
            if entry is None or entry[1] is None:
                return None
            return entry[1] - self._now()


class RedisKeyValueStore:
    """Store backed by Redis string keys with native expiry."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisKeyValueStore:
        """Build a store from a redis:// URL."""
        return cls(redis.from_url(url, decode_responses=True))  # type: ignore[no-untyped-call]

    def get(self, key: str) -> str | None:
        try:
            value = self._redis.get(key)
        except redis.RedisError as err:
            raise StoreError(str(err)) from err
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value  # type: ignore[return-value]

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            self._redis.set(key, value, ex=ttl_seconds)
        except redis.RedisError as err:
            raise StoreError(str(err)) from err

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError as err:
            raise StoreError(str(err)) from err

    def list(self, prefix: str) -> list[str]:
        try:
            keys = self._redis.scan_iter(match=f"{prefix}*")
            return sorted(k.decode("utf-8") if isinstance(k, bytes) else k for k in keys)
        except redis.RedisError as err:
            raise StoreError(str(err)) from err


class PrefixedKeyValueStore:
    """Wrap a store so every key lives under a fixed namespace."""

    def __init__(self, inner: KeyValueStore, prefix: str) -> None:
        self._inner = inner
        self._prefix = prefix

    def get(self, key: str) -> str | None:
        return self._inner.get(self._prefix + key)

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        self._inner.put(self._prefix + key, value, ttl_seconds)

    def delete(self, key: str) -> None:
        self._inner.delete(self._prefix + key)

    def list(self, prefix: str) -> list[str]:
        offset = len(self._prefix)
        return [key[offset:] for key in self._inner.list(self._prefix + prefix)]
