# src/inventory_relay/services/aliases.py
"""Expiring share aliases.

An alias is a short-lived code that resolves to a primary share while
presenting its own display name, notes and expiry. Aliases and primaries
share one code space. Each primary keeps an index of its alias codes for
listing and removal.

Referential integrity is only checked when an alias is created: deleting or
expiring the primary leaves its aliases in place until their own TTL runs
out, and resolving such an alias reports the primary as missing.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Final

from inventory_relay.core.errors import (
    ExpiredError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from inventory_relay.core.settings import settings
from inventory_relay.db.store import KeyValueStore, get_json, put_json
from inventory_relay.db.time import Clock, seconds_until, utcnow
from inventory_relay.models import AliasIndex, AliasRecord
from inventory_relay.services.shares import (
    SHARE_CODE_ALPHABET,
    SHARE_CODE_LENGTH,
    ResolvedShare,
    ShareStore,
    share_key,
    validate_share_code,
)

logger = logging.getLogger(__name__)

ALIAS_PREFIX: Final[str] = "expiring:"
ALIAS_INDEX_PREFIX: Final[str] = "expiring-index:"


def alias_key(code: str) -> str:
    return f"{ALIAS_PREFIX}{code}"


def alias_index_key(main_code: str) -> str:
    return f"{ALIAS_INDEX_PREFIX}{main_code}"


def generate_share_code() -> str:
    """Return a random code from the shared share/alias alphabet."""
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


class AliasStore:
    """Manage aliases and the per-primary alias index."""

    def __init__(
        self,
        store: KeyValueStore,
        shares: ShareStore,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._shares = shares
        self._clock = clock
        self._min_ttl = settings.min_ttl_seconds
        self.code_factory = generate_share_code

    def _ttl_until(self, expires_at: datetime, now: datetime) -> int:
        return max(self._min_ttl, seconds_until(expires_at, now))

    def load(self, code: str) -> AliasRecord | None:
        document = get_json(self._store, alias_key(code))
        if document is None:
            return None
        return AliasRecord.model_validate(document)

    def load_index(self, main_code: str) -> AliasIndex | None:
        document = get_json(self._store, alias_index_key(main_code))
        if document is None:
            return None
        return AliasIndex.model_validate(document)

    def _save_index(self, main_code: str, index: AliasIndex, now: datetime) -> None:
        put_json(
            self._store,
            alias_index_key(main_code),
            index.to_document(),
            self._ttl_until(index.expires_at, now),
        )

    def _unique_code(self) -> str:
        for _ in range(settings.alias_code_attempts):
            code = self.code_factory()
            if self._store.get(share_key(code)) is None and self._store.get(alias_key(code)) is None:
                return code
        logger.error("Exhausted %d attempts generating an alias code", settings.alias_code_attempts)
        raise InternalError("Failed to generate unique share code")

    @staticmethod
    def validate_duration(duration_seconds: int) -> None:
        if not (
            settings.alias_min_duration_seconds
            <= duration_seconds
            <= settings.alias_max_duration_seconds
        ):
            raise ValidationError(
                "Invalid expiration duration (must be between 1 hour and 30 days + 23 hours)"
            )

    def create(
        self,
        main_share_code: str,
        display_name: str,
        share_notes: str | None,
        duration_seconds: int,
        requester_address: str | None = None,
    ) -> AliasRecord:
        """Create an alias for an existing primary share."""
        validate_share_code(main_share_code, field="main share code")
        if not display_name:
            raise ValidationError("Missing required fields: displayName")
        self.validate_duration(duration_seconds)
        if not self._shares.exists(main_share_code):
            raise NotFoundError("Main share not found")

        code = self._unique_code()
        now = self._clock()
        record = AliasRecord(
            share_code=code,
            main_share_code=main_share_code,
            display_name=display_name,
            share_notes=share_notes or None,
            expires_at=now + timedelta(seconds=duration_seconds),
            created_at=now,
            created_by_address=requester_address,
        )
        put_json(
            self._store,
            alias_key(code),
            record.to_document(),
            self._ttl_until(record.expires_at, now),
        )

        # Read-append-write; concurrent creates for one primary may drop an entry.
        index = self.load_index(main_share_code)
        if index is None:
            index = AliasIndex(share_codes=[code], expires_at=record.expires_at)
        else:
            index.share_codes.append(code)
            index.expires_at = max(index.expires_at, record.expires_at)
        self._save_index(main_share_code, index, now)

        logger.info(
            "Created expiring share %s for %s expiring %s",
            code,
            main_share_code,
            record.expires_at.isoformat(),
        )
        return record

    def get(self, code: str) -> ResolvedShare:
        """Resolve a code that may name either a primary share or an alias."""
        if self._shares.exists(code):
            return self._shares.get(code)

        record = self.load(code)
        if record is None:
            raise NotFoundError("Share not found")

        now = self._clock()
        if record.expires_at <= now:
            raise ExpiredError("Share has expired")

        primary = self._shares.load(record.main_share_code)
        if primary is None:
            raise NotFoundError("Main share not found")

        record.access_count += 1
        record.last_accessed_at = now
        put_json(
            self._store,
            alias_key(code),
            record.to_document(),
            self._ttl_until(record.expires_at, now),
        )

        return ResolvedShare(
            snapshot_data=primary.snapshot_data,
            public_key=primary.public_key,
            expires_at=record.expires_at,
            display_name=record.display_name,
            share_notes=record.share_notes,
        )

    def list(self, main_share_code: str) -> list[AliasRecord]:
        """Return live aliases of a primary, soonest expiry first."""
        validate_share_code(main_share_code, field="main share code")
        if not self._shares.exists(main_share_code):
            raise NotFoundError("Main share not found")

        index = self.load_index(main_share_code)
        if index is None:
            return []

        now = self._clock()
        live = []
        for code in index.share_codes:
            record = self.load(code)
            if record is not None and record.expires_at > now:
                live.append(record)
        live.sort(key=lambda alias: alias.expires_at)
        return live

    def delete(self, code: str) -> None:
        """Delete an alias and drop it from its primary's index.

        No ownership proof is required; knowing the alias code is enough.
        """
        record = self.load(code)
        if record is None:
            raise NotFoundError("Expiring share not found")

        index = self.load_index(record.main_share_code)
        if index is not None:
            # Rebuild from the aliases still stored so the TTL follows the survivors.
            remaining = [self.load(c) for c in index.share_codes if c != code]
            live = [alias for alias in remaining if alias is not None]
            if live:
                index.share_codes = [alias.share_code for alias in live]
                index.expires_at = max(alias.expires_at for alias in live)
                self._save_index(record.main_share_code, index, self._clock())
            else:
                self._store.delete(alias_index_key(record.main_share_code))

        self._store.delete(alias_key(code))
        logger.info("Deleted expiring share %s of %s", code, record.main_share_code)
