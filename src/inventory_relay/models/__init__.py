# src/inventory_relay/models/__init__.py
"""Documents persisted in the key-value store."""

from .backup import BackupEntry, BackupIndexEntry, KeyRegistryEntry
from .share import AliasIndex, AliasRecord, ShareRecord

__all__ = [
    "AliasIndex",
    "AliasRecord",
    "BackupEntry",
    "BackupIndexEntry",
    "KeyRegistryEntry",
    "ShareRecord",
]
