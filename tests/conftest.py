# tests/conftest.py
from __future__ import annotations

import base64
import json
import struct
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from nacl.signing import SigningKey

from inventory_relay.db.session import get_clock, get_store
from inventory_relay.db.store import MemoryKeyValueStore
from inventory_relay.main import app as fastapi_app
from inventory_relay.services.aliases import AliasStore
from inventory_relay.services.backups import BackupStore
from inventory_relay.services.key_registry import KeyRegistry
from inventory_relay.services.shares import ShareStore

START_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)
BACKUP_KEY = "ABC-DEF-234"


def build_snapshot(payload: dict[str, Any], signature: bytes = b"\x00" * 64) -> bytes:
    """Assemble raw snapshot bytes: i32 LE length, JSON body, trailing signature."""
    body = json.dumps(payload).encode("utf-8")
    return struct.pack("<i", len(body)) + body + signature


class ManualClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class Identity:
    """Ed25519 key pair standing in for a client device."""

    def __init__(self) -> None:
        self.signing_key = SigningKey.generate()

    @property
    def public_key(self) -> str:
        return base64.b64encode(bytes(self.signing_key.verify_key)).decode()

    def sign(self, message: str) -> str:
        return base64.b64encode(self.signing_key.sign(message.encode()).signature).decode()


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(START_TIME)


@pytest.fixture()
def store(clock: ManualClock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(clock)


@pytest.fixture()
def app(store: MemoryKeyValueStore, clock: ManualClock) -> Iterator[FastAPI]:
    """Provide the FastAPI app wired to the in-memory store and manual clock."""
    fastapi_app.dependency_overrides[get_store] = lambda: store
    fastapi_app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def identity() -> Identity:
    return Identity()


@pytest.fixture()
def other_identity() -> Identity:
    return Identity()


@pytest.fixture()
def raw_snapshot() -> Callable[..., bytes]:
    return build_snapshot


@pytest.fixture()
def snapshot_factory() -> Callable[..., str]:
    """Build base64 snapshot blobs, optionally carrying a timestamp."""

    def factory(timestamp: str | None = None, **fields: Any) -> str:
        payload: dict[str, Any] = {"items": [], **fields}
        if timestamp is not None:
            payload["timestamp"] = timestamp
        return base64.b64encode(build_snapshot(payload)).decode()

    return factory


@pytest.fixture()
def share_store(store: MemoryKeyValueStore, clock: ManualClock) -> ShareStore:
    return ShareStore(store, clock)


@pytest.fixture()
def alias_store(store: MemoryKeyValueStore, share_store: ShareStore, clock: ManualClock) -> AliasStore:
    return AliasStore(store, share_store, clock)


@pytest.fixture()
def key_registry(store: MemoryKeyValueStore, clock: ManualClock) -> KeyRegistry:
    return KeyRegistry(store, clock)


@pytest.fixture()
def backup_store(
    store: MemoryKeyValueStore,
    key_registry: KeyRegistry,
    clock: ManualClock,
) -> BackupStore:
    return BackupStore(store, key_registry, clock)


@pytest.fixture()
def registered_key(key_registry: KeyRegistry, identity: Identity) -> str:
    """Register ``BACKUP_KEY`` to ``identity`` and return it."""
    key_registry.register(BACKUP_KEY, identity.public_key, "127.0.0.1")
    return BACKUP_KEY
