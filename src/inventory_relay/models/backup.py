# src/inventory_relay/models/backup.py
"""Backup history and key registry documents."""

from __future__ import annotations

from .base import IsoDatetime, StoredDocument


class BackupEntry(StoredDocument):
    """One stored version of a backup stream."""

    data: str
    checksum: str
    created_at: IsoDatetime


class BackupIndexEntry(StoredDocument):
    """Pointer to a BackupEntry; ``timestamp`` is part of the entry's key."""

    timestamp: str
    checksum: str


class KeyRegistryEntry(StoredDocument):
    """Permanent binding of a backup key to a public key."""

    public_key: str
    created_at: IsoDatetime
    created_by_address: str | None = None
