# src/inventory_relay/services/shares.py
"""Primary share records.

A share is created by anyone who claims an unused code; the public key sent
at creation becomes the sole credential for later updates and deletion.
Retention is anchored to the timestamp embedded in the snapshot, never to
request or access time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final

from inventory_relay.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from inventory_relay.core.settings import settings
from inventory_relay.db.store import KeyValueStore, get_json, put_json
from inventory_relay.db.time import Clock, seconds_until, utcnow
from inventory_relay.models import ShareRecord
from inventory_relay.services.crypto import CryptoService, crypto_service
from inventory_relay.services.snapshot import extract_snapshot_timestamp

logger = logging.getLogger(__name__)

SHARE_CODE_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
SHARE_CODE_LENGTH: Final[int] = 6
SHARE_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z0-9]{6}$")


@dataclass(frozen=True)
class ResolvedShare:
    """What a reader receives when fetching a share code."""

    snapshot_data: str
    public_key: str
    expires_at: datetime
    display_name: str | None = None
    share_notes: str | None = None


def share_key(code: str) -> str:
    return f"share:{code}"


def validate_share_code(code: str, *, field: str = "share code") -> None:
    """Raise ValidationError unless ``code`` is six uppercase alphanumerics."""
    if not isinstance(code, str) or not SHARE_CODE_PATTERN.fullmatch(code):
        raise ValidationError(
            f"Invalid {field} format (must be 6 uppercase alphanumeric characters)"
        )


def require_signature(signature: str | None) -> str:
    """Return the signature or raise if the header was not sent."""
    if not signature:
        raise AuthorizationError("Missing ownership signature")
    return signature


class ShareStore:
    """Create, read, update and delete primary shares."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utcnow,
        crypto: CryptoService = crypto_service,
    ) -> None:
        self._store = store
        self._clock = clock
        self._crypto = crypto
        self._retention = timedelta(seconds=settings.share_retention_seconds)
        self._min_ttl = settings.min_ttl_seconds

    def _ttl_until(self, expires_at: datetime, now: datetime) -> int:
        return max(self._min_ttl, seconds_until(expires_at, now))

    def _retention_anchor(self, snapshot_data: str, now: datetime) -> datetime:
        """Return the snapshot timestamp, or ``now`` when it is missing or too late to expire."""
        anchor = extract_snapshot_timestamp(snapshot_data)
        if anchor is None:
            return now
        try:
            anchor + self._retention
        except OverflowError:
            logger.debug("Snapshot timestamp %s leaves no room for retention", anchor.isoformat())
            return now
        return anchor

    def _validate_public_key(self, public_key: str) -> None:
        try:
            self._crypto.validate_public_key(public_key)
        except ValueError as err:
            raise ValidationError(str(err)) from err

    def _save(self, record: ShareRecord, now: datetime) -> None:
        put_json(
            self._store,
            share_key(record.share_code),
            record.to_document(),
            self._ttl_until(record.expires_at, now),
        )

    def load(self, code: str) -> ShareRecord | None:
        """Return the stored record without touching access counters."""
        document = get_json(self._store, share_key(code))
        if document is None:
            return None
        return ShareRecord.model_validate(document)

    def exists(self, code: str) -> bool:
        return self._store.get(share_key(code)) is not None

    def _require(self, code: str) -> ShareRecord:
        record = self.load(code)
        if record is None:
            raise NotFoundError("Share not found")
        return record

    def _check_owner(self, record: ShareRecord, signature: str | None) -> None:
        signature = require_signature(signature)
        if not self._crypto.verify_ownership(signature, record.share_code, record.public_key):
            logger.warning("Rejected ownership signature for share %s", record.share_code)
            raise AuthorizationError("Invalid ownership signature")

    def create(
        self,
        code: str,
        snapshot_data: str,
        public_key: str,
        requester_address: str | None = None,
    ) -> ShareRecord:
        """Claim ``code`` for a new share.

        Raises:
            ValidationError: If the code or public key is malformed.
            ConflictError: If a share already exists at ``code``.
        """
        validate_share_code(code)
        self._validate_public_key(public_key)
        # Only the share namespace is checked; a live alias code can be claimed.
        if self.exists(code):
            raise ConflictError("Share code already exists")

        now = self._clock()
        anchor = self._retention_anchor(snapshot_data, now)
        record = ShareRecord(
            share_code=code,
            snapshot_data=snapshot_data,
            public_key=public_key,
            snapshot_timestamp=anchor,
            expires_at=anchor + self._retention,
            created_at=now,
            created_by_address=requester_address,
        )
        self._save(record, now)
        logger.info("Created share %s expiring %s", code, record.expires_at.isoformat())
        return record

    def get(self, code: str) -> ResolvedShare:
        """Fetch a share and record the access without extending its expiry."""
        record = self._require(code)
        now = self._clock()
        record.access_count += 1
        record.last_accessed_at = now
        self._save(record, now)
        return ResolvedShare(
            snapshot_data=record.snapshot_data,
            public_key=record.public_key,
            expires_at=record.expires_at,
            display_name=record.display_name,
            share_notes=record.share_notes,
        )

    def update(
        self,
        code: str,
        snapshot_data: str,
        public_key: str,
        signature: str | None,
    ) -> ShareRecord:
        """Replace the snapshot and key; authorised by the currently stored key.

        The retention window restarts from the new snapshot's timestamp.
        """
        record = self._require(code)
        self._check_owner(record, signature)
        self._validate_public_key(public_key)

        now = self._clock()
        anchor = self._retention_anchor(snapshot_data, now)
        record.snapshot_data = snapshot_data
        record.public_key = public_key
        record.snapshot_timestamp = anchor
        record.expires_at = anchor + self._retention
        record.updated_at = now
        self._save(record, now)
        logger.info("Updated share %s expiring %s", code, record.expires_at.isoformat())
        return record

    def delete(self, code: str, signature: str | None) -> None:
        """Remove a share. Aliases pointing at it are left to expire on their own."""
        record = self._require(code)
        self._check_owner(record, signature)
        self._store.delete(share_key(code))
        logger.info("Deleted share %s", code)
