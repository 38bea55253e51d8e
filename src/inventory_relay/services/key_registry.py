"""Permanent backup-key registrations."""

from __future__ import annotations

import logging
import re
from typing import Final

from inventory_relay.core.errors import ConflictError, NotFoundError, ValidationError
from inventory_relay.db.store import KeyValueStore, get_json, put_json
from inventory_relay.db.time import Clock, utcnow
from inventory_relay.models import KeyRegistryEntry
from inventory_relay.services.crypto import CryptoService, crypto_service

logger = logging.getLogger(__name__)

# Three groups of three; 0, 1, O and I style confusables are excluded by using 2-9.
BACKUP_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z2-9]{3}-[A-Z2-9]{3}-[A-Z2-9]{3}$")


def registry_key(backup_key: str) -> str:
    return f"backup-registry:{backup_key}"


def validate_backup_key(backup_key: str) -> None:
    if not isinstance(backup_key, str) or not BACKUP_KEY_PATTERN.fullmatch(backup_key):
        raise ValidationError("Invalid backup key format (must be XXX-XXX-XXX with A-Z, 2-9)")


class KeyRegistry:
    """First-come, first-served binding of backup keys to public keys."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utcnow,
        crypto: CryptoService = crypto_service,
    ) -> None:
        self._store = store
        self._clock = clock
        self._crypto = crypto

    def lookup(self, backup_key: str) -> KeyRegistryEntry | None:
        document = get_json(self._store, registry_key(backup_key))
        if document is None:
            return None
        return KeyRegistryEntry.model_validate(document)

    def require(self, backup_key: str, message: str = "Backup key not found") -> KeyRegistryEntry:
        entry = self.lookup(backup_key)
        if entry is None:
            raise NotFoundError(message)
        return entry

    def register(
        self,
        backup_key: str,
        public_key: str,
        requester_address: str | None = None,
    ) -> KeyRegistryEntry:
        """Bind ``backup_key`` to ``public_key`` forever.

        Raises:
            ValidationError: If the key or public key is malformed.
            ConflictError: If the key was ever registered before.
        """
        validate_backup_key(backup_key)
        try:
            self._crypto.validate_public_key(public_key)
        except ValueError as err:
            raise ValidationError(str(err)) from err
        if self.lookup(backup_key) is not None:
            raise ConflictError("Backup key already registered")

        entry = KeyRegistryEntry(
            public_key=public_key,
            created_at=self._clock(),
            created_by_address=requester_address,
        )
        put_json(self._store, registry_key(backup_key), entry.to_document())
        logger.info("Registered backup key %s", backup_key)
        return entry
