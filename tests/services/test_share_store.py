# tests/services/test_share_store.py
"""Tests for primary share records."""

import base64
from datetime import UTC, datetime, timedelta

import pytest

from inventory_relay.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from inventory_relay.db.time import to_iso
from inventory_relay.services.shares import ShareStore, share_key

RETENTION = timedelta(days=90)


def test_create_then_get_round_trip(share_store: ShareStore, identity, snapshot_factory) -> None:
    snapshot = snapshot_factory("2024-05-30T08:00:00Z", items=[{"name": "Drill"}])
    share_store.create("ABC123", snapshot, identity.public_key, "203.0.113.9")

    resolved = share_store.get("ABC123")
    assert resolved.snapshot_data == snapshot
    assert resolved.public_key == identity.public_key
    assert resolved.display_name is None
    assert resolved.share_notes is None


def test_expiry_anchored_to_snapshot_timestamp(share_store: ShareStore, identity, snapshot_factory) -> None:
    record = share_store.create("ABC123", snapshot_factory("2024-01-01T00:00:00Z"), identity.public_key)
    assert to_iso(record.expires_at) == "2024-03-31T00:00:00Z"
    assert record.snapshot_timestamp == datetime(2024, 1, 1, tzinfo=UTC)


def test_past_expiry_is_clamped_to_minimum_ttl(
    share_store: ShareStore, store, clock, identity, snapshot_factory
) -> None:
    share_store.create("ABC123", snapshot_factory("2024-01-01T00:00:00Z"), identity.public_key)
    assert store.ttl(share_key("ABC123")) == 60

    clock.advance(seconds=61)
    with pytest.raises(NotFoundError):
        share_store.get("ABC123")


def test_missing_timestamp_anchors_to_now(share_store: ShareStore, clock, identity, snapshot_factory) -> None:
    record = share_store.create("ABC123", snapshot_factory(), identity.public_key)
    assert record.snapshot_timestamp == clock.now
    assert record.expires_at == clock.now + RETENTION


def test_reads_do_not_extend_expiry(share_store: ShareStore, store, clock, identity, snapshot_factory) -> None:
    created = share_store.create("ABC123", snapshot_factory("2024-06-01T00:00:00Z"), identity.public_key)
    # 90 days from midnight, read at noon.
    assert store.ttl(share_key("ABC123")) == 90 * 86400 - 12 * 3600

    clock.advance(hours=1)
    first = share_store.get("ABC123")
    clock.advance(hours=1)
    second = share_store.get("ABC123")

    assert first.expires_at == second.expires_at == created.expires_at
    assert store.ttl(share_key("ABC123")) == 90 * 86400 - 14 * 3600

    record = share_store.load("ABC123")
    assert record.access_count == 2
    assert record.last_accessed_at == clock.now


@pytest.mark.parametrize("code", ["abc123", "ABC12", "ABC1234", "ABC-12", ""])
def test_create_rejects_malformed_codes(share_store: ShareStore, identity, snapshot_factory, code) -> None:
    with pytest.raises(ValidationError):
        share_store.create(code, snapshot_factory(), identity.public_key)


def test_create_rejects_malformed_public_key(share_store: ShareStore, snapshot_factory) -> None:
    with pytest.raises(ValidationError):
        share_store.create("ABC123", snapshot_factory(), base64.b64encode(b"x" * 16).decode())


def test_create_rejects_taken_code(share_store: ShareStore, identity, other_identity, snapshot_factory) -> None:
    share_store.create("ABC123", snapshot_factory(), identity.public_key)
    with pytest.raises(ConflictError):
        share_store.create("ABC123", snapshot_factory(), other_identity.public_key)


class TestUpdate:
    """Updates are authorised by the key stored before the update."""

    def test_update_resets_retention_and_rotates_key(
        self, share_store: ShareStore, clock, identity, other_identity, snapshot_factory
    ) -> None:
        share_store.create("ABC123", snapshot_factory("2024-05-01T00:00:00Z"), identity.public_key)
        clock.advance(minutes=5)

        new_snapshot = snapshot_factory("2024-06-01T00:00:00Z")
        record = share_store.update(
            "ABC123", new_snapshot, other_identity.public_key, identity.sign("ABC123")
        )

        assert to_iso(record.expires_at) == "2024-08-30T00:00:00Z"
        assert record.updated_at == clock.now
        resolved = share_store.get("ABC123")
        assert resolved.snapshot_data == new_snapshot
        assert resolved.public_key == other_identity.public_key

        # The old key no longer controls the share.
        with pytest.raises(AuthorizationError):
            share_store.update(
                "ABC123", snapshot_factory(), identity.public_key, identity.sign("ABC123")
            )

    def test_update_without_signature(self, share_store: ShareStore, identity, snapshot_factory) -> None:
        share_store.create("ABC123", snapshot_factory(), identity.public_key)
        with pytest.raises(AuthorizationError, match="Missing ownership signature"):
            share_store.update("ABC123", snapshot_factory(), identity.public_key, None)

    def test_signature_over_other_code_is_rejected(
        self, share_store: ShareStore, identity, snapshot_factory
    ) -> None:
        original = snapshot_factory("2024-05-01T00:00:00Z")
        share_store.create("ABC123", original, identity.public_key)

        with pytest.raises(AuthorizationError, match="Invalid ownership signature"):
            share_store.update("ABC123", snapshot_factory(), identity.public_key, identity.sign("XYZ789"))
        assert share_store.load("ABC123").snapshot_data == original

    def test_signature_from_new_key_is_rejected(
        self, share_store: ShareStore, identity, other_identity, snapshot_factory
    ) -> None:
        share_store.create("ABC123", snapshot_factory(), identity.public_key)
        with pytest.raises(AuthorizationError):
            share_store.update(
                "ABC123",
                snapshot_factory(),
                other_identity.public_key,
                other_identity.sign("ABC123"),
            )

    def test_update_missing_share(self, share_store: ShareStore, identity, snapshot_factory) -> None:
        with pytest.raises(NotFoundError):
            share_store.update("ABC123", snapshot_factory(), identity.public_key, identity.sign("ABC123"))


def test_delete_requires_stored_key(
    share_store: ShareStore, identity, other_identity, snapshot_factory
) -> None:
    share_store.create("ABC123", snapshot_factory(), identity.public_key)

    with pytest.raises(AuthorizationError):
        share_store.delete("ABC123", other_identity.sign("ABC123"))
    assert share_store.exists("ABC123")

    share_store.delete("ABC123", identity.sign("ABC123"))
    assert not share_store.exists("ABC123")
    with pytest.raises(NotFoundError):
        share_store.get("ABC123")


def test_unrepresentable_expiry_anchors_to_now(
    share_store: ShareStore, clock, identity, snapshot_factory
) -> None:
    record = share_store.create("ABC123", snapshot_factory("9999-12-31T00:00:00Z"), identity.public_key)
    assert record.snapshot_timestamp == clock.now
    assert record.expires_at == clock.now + RETENTION

    clock.advance(minutes=1)
    updated = share_store.update(
        "ABC123", snapshot_factory("9999-12-31T23:59:59Z"), identity.public_key, identity.sign("ABC123")
    )
    assert updated.expires_at == clock.now + RETENTION
