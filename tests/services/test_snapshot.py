# tests/services/test_snapshot.py
"""Tests for snapshot timestamp extraction."""

import base64
import struct
from datetime import UTC, datetime

import pytest

from inventory_relay.services.snapshot import extract_snapshot_timestamp


def _encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


MALFORMED = {
    "empty": lambda build: "",
    "not-base64": lambda build: "@@@@",
    "junk-in-base64": lambda build: "!" + _encode(build({"timestamp": "2024-01-01T00:00:00Z"})) + "!",
    "too-short": lambda build: _encode(b"\x00" * 10),
    "trailing-byte": lambda build: _encode(build({"timestamp": "2024-01-01T00:00:00Z"}) + b"\x00"),
    "truncated-signature": lambda build: _encode(build({"timestamp": "2024-01-01T00:00:00Z"})[:-1]),
    "negative-length": lambda build: _encode(struct.pack("<i", -5) + b"\x00" * 70),
    "invalid-json": lambda build: _encode(struct.pack("<i", 4) + b"{{{{" + b"\x00" * 64),
    "unparseable-timestamp": lambda build: _encode(build({"timestamp": "last tuesday"})),
    "numeric-timestamp": lambda build: _encode(build({"timestamp": 1704067200})),
    "out-of-range-offset": lambda build: _encode(build({"timestamp": "0001-01-01T00:00:00+01:00"})),
}


def test_extracts_embedded_timestamp(snapshot_factory) -> None:
    snapshot = snapshot_factory("2024-01-01T00:00:00Z")
    assert extract_snapshot_timestamp(snapshot) == datetime(2024, 1, 1, tzinfo=UTC)


def test_accepts_urlsafe_encoding(raw_snapshot) -> None:
    raw = raw_snapshot({"timestamp": "2024-02-03T04:05:06.789Z"}, signature=b"\xff" * 64)
    snapshot = base64.urlsafe_b64encode(raw).decode().rstrip("=")
    assert extract_snapshot_timestamp(snapshot) == datetime(2024, 2, 3, 4, 5, 6, 789000, tzinfo=UTC)


def test_missing_timestamp(snapshot_factory) -> None:
    assert extract_snapshot_timestamp(snapshot_factory()) is None


@pytest.mark.parametrize("case", sorted(MALFORMED))
def test_extraction_failures_return_none(raw_snapshot, case: str) -> None:
    assert extract_snapshot_timestamp(MALFORMED[case](raw_snapshot)) is None
