"""Parsing of client-signed snapshot blobs.

A snapshot is base64 of ``[u32 little-endian length N][N bytes UTF-8 JSON][64-byte signature]``.
Only the embedded ``timestamp`` is of interest to the server; it anchors
share retention. The trailing signature is the client's own and is not
checked here.
"""

from __future__ import annotations

import json
import logging
import struct
from datetime import datetime

from inventory_relay.core.security import SIGNATURE_LENGTH_BYTES, decode_base64
from inventory_relay.db.time import parse_iso

logger = logging.getLogger(__name__)

LENGTH_PREFIX_BYTES = 4


def extract_snapshot_timestamp(snapshot_data: str) -> datetime | None:
    """Return the ``timestamp`` embedded in a snapshot, or None if extraction fails."""
    raw = decode_base64(snapshot_data)
    if raw is None or len(raw) < LENGTH_PREFIX_BYTES + SIGNATURE_LENGTH_BYTES:
        return None

    (json_length,) = struct.unpack_from("<i", raw, 0)
    if json_length < 0 or len(raw) != LENGTH_PREFIX_BYTES + json_length + SIGNATURE_LENGTH_BYTES:
        return None

    body = raw[LENGTH_PREFIX_BYTES:LENGTH_PREFIX_BYTES + json_length]
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.debug("Snapshot payload is not valid JSON")
        return None

    timestamp = payload.get("timestamp") if isinstance(payload, dict) else None
    if not isinstance(timestamp, str) or not timestamp:
        return None
    try:
        return parse_iso(timestamp)
    except (ValueError, OverflowError):
        logger.debug("Snapshot timestamp %r is not ISO-8601", timestamp)
        return None
