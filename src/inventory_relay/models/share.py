# src/inventory_relay/models/share.py
"""Share and expiring-share documents."""

from __future__ import annotations

from .base import IsoDatetime, StoredDocument


class ShareRecord(StoredDocument):
    """Primary share. ``public_key`` is the only mutation credential."""

    share_code: str
    snapshot_data: str
    public_key: str
    snapshot_timestamp: IsoDatetime
    expires_at: IsoDatetime
    created_at: IsoDatetime
    created_by_address: str | None = None
    updated_at: IsoDatetime | None = None
    display_name: str | None = None
    share_notes: str | None = None
    access_count: int = 0
    last_accessed_at: IsoDatetime | None = None


class AliasRecord(StoredDocument):
    """Time-boxed code that resolves to a primary share."""

    share_code: str
    main_share_code: str
    display_name: str
    share_notes: str | None = None
    expires_at: IsoDatetime
    created_at: IsoDatetime
    created_by_address: str | None = None
    access_count: int = 0
    last_accessed_at: IsoDatetime | None = None


class AliasIndex(StoredDocument):
    """Ordered alias codes for one primary share."""

    share_codes: list[str] = []
    # Latest expiry among the indexed aliases; drives the index TTL.
    expires_at: IsoDatetime
