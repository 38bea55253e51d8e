# src/inventory_relay/services/backups.py
"""Versioned backups per (backup key, type).

Each stream keeps at most ``max_backups_per_type`` versions. An upload whose
checksum matches the newest version is skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from inventory_relay.core.errors import AuthorizationError, NotFoundError, ValidationError
from inventory_relay.core.settings import settings
from inventory_relay.db.store import KeyValueStore, get_json, put_json
from inventory_relay.db.time import Clock, to_iso, utcnow
from inventory_relay.models import BackupEntry, BackupIndexEntry
from inventory_relay.services.crypto import CryptoService, crypto_service
from inventory_relay.services.key_registry import KeyRegistry, validate_backup_key
from inventory_relay.services.shares import require_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload; ``skipped`` is True for unchanged content."""

    skipped: bool
    timestamp: str
    backup_count: int


@dataclass(frozen=True)
class DownloadResult:
    """Latest version of a backup stream."""

    data: str
    checksum: str
    timestamp: str
    backup_count: int


def backup_index_key(backup_key: str, backup_type: str) -> str:
    return f"backup-index:{backup_key}:{backup_type}"


def backup_entry_key(backup_key: str, backup_type: str, timestamp: str) -> str:
    return f"backup:{backup_key}:{backup_type}:{timestamp}"


def validate_backup_type(backup_type: str | None) -> str:
    if not backup_type or backup_type not in settings.backup_types:
        allowed = ", ".join(settings.backup_types)
        raise ValidationError(f"Invalid or missing type (must be: {allowed})")
    return backup_type


class BackupStore:
    """Upload and download backups guarded by registered keys."""

    def __init__(
        self,
        store: KeyValueStore,
        registry: KeyRegistry,
        clock: Clock = utcnow,
        crypto: CryptoService = crypto_service,
    ) -> None:
        self._store = store
        self._registry = registry
        self._clock = clock
        self._crypto = crypto
        self._ttl = settings.backup_ttl_seconds
        self._cap = settings.max_backups_per_type

    def load_index(self, backup_key: str, backup_type: str) -> list[BackupIndexEntry]:
        document = get_json(self._store, backup_index_key(backup_key, backup_type))
        if not document:
            return []
        return [BackupIndexEntry.model_validate(item) for item in document]

    def upload(
        self,
        backup_key: str,
        backup_type: str,
        data: str,
        checksum: str,
        signature: str | None,
    ) -> UploadResult:
        """Store a new version unless it matches the newest one.

        Raises:
            ValidationError: Malformed key, type or missing payload.
            NotFoundError: The key is not registered.
            AuthorizationError: The signature does not verify against the registered key.
        """
        validate_backup_key(backup_key)
        validate_backup_type(backup_type)
        if not data or not checksum:
            raise ValidationError("Missing required fields: type, data, checksum")

        entry = self._registry.require(backup_key, "Backup key not registered")
        signature = require_signature(signature)
        if not self._crypto.verify_ownership(signature, backup_key, entry.public_key):
            logger.warning("Rejected ownership signature for backup key %s", backup_key)
            raise AuthorizationError("Invalid ownership signature")

        # Read-append-write; concurrent uploads to one stream are last-write-wins.
        index = self.load_index(backup_key, backup_type)
        if index and index[-1].checksum == checksum:
            return UploadResult(
                skipped=True,
                timestamp=index[-1].timestamp,
                backup_count=len(index),
            )

        now: datetime = self._clock()
        timestamp = to_iso(now)
        backup = BackupEntry(data=data, checksum=checksum, created_at=now)
        put_json(
            self._store,
            backup_entry_key(backup_key, backup_type, timestamp),
            backup.to_document(),
            self._ttl,
        )

        index.append(BackupIndexEntry(timestamp=timestamp, checksum=checksum))
        while len(index) > self._cap:
            oldest = index.pop(0)
            self._store.delete(backup_entry_key(backup_key, backup_type, oldest.timestamp))

        put_json(
            self._store,
            backup_index_key(backup_key, backup_type),
            [item.to_document() for item in index],
            self._ttl,
        )
        logger.info(
            "Stored %s backup for %s at %s (%d kept)",
            backup_type,
            backup_key,
            timestamp,
            len(index),
        )
        return UploadResult(skipped=False, timestamp=timestamp, backup_count=len(index))

    def download(self, backup_key: str, backup_type: str) -> DownloadResult:
        """Return the newest version of a backup stream."""
        validate_backup_key(backup_key)
        validate_backup_type(backup_type)
        self._registry.require(backup_key)

        index = self.load_index(backup_key, backup_type)
        if not index:
            raise NotFoundError("No backups found for this type")

        latest = index[-1]
        document = get_json(self._store, backup_entry_key(backup_key, backup_type, latest.timestamp))
        if document is None:
            raise NotFoundError("Backup data not found")
        backup = BackupEntry.model_validate(document)
        return DownloadResult(
            data=backup.data,
            checksum=backup.checksum,
            timestamp=latest.timestamp,
            backup_count=len(index),
        )
