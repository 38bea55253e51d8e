"""Signature utilities built on Ed25519 primitives."""
from __future__ import annotations

import base64
import binascii
import hashlib

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

PUBKEY_LENGTH_BYTES = 32
SIGNATURE_LENGTH_BYTES = 64

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def decode_base64(value: str) -> bytes | None:
    """Decode standard or URL-safe base64, tolerating missing padding.

    Characters outside the alphabet are rejected rather than skipped.

    Returns:
        The decoded bytes, or None if ``value`` is not valid base64.
    """
    cleaned = value.strip()
    padded = cleaned + "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError):
        pass
    try:
        return base64.b64decode(padded.translate(_URLSAFE_TO_STANDARD), validate=True)
    except (binascii.Error, ValueError):
        return None


def verify_signature(signature: bytes, message: bytes, public_key: bytes) -> bool:
    """Verify a detached Ed25519 signature.

    Args:
        signature: Raw 64-byte signature.
        message: Exact bytes that were signed on the client.
        public_key: Raw 32-byte public key.

    Returns:
        True if the signature is valid for `message` under `public_key`; False otherwise.
    """
    if len(public_key) != PUBKEY_LENGTH_BYTES or len(signature) != SIGNATURE_LENGTH_BYTES:
        return False
    try:
        VerifyKey(public_key).verify(message, signature)
        return True
    except (BadSignatureError, ValueError, TypeError):
        return False


def verify_ownership(signature_b64: str | None, message: str, public_key_b64: str | None) -> bool:
    """Verify a base64 ownership signature over a record identifier.

    Malformed base64 or wrong-length inputs resolve to False.
    """
    if not signature_b64 or not public_key_b64:
        return False
    signature = decode_base64(signature_b64)
    public_key = decode_base64(public_key_b64)
    if signature is None or public_key is None:
        return False
    return verify_signature(signature, message.encode("utf-8"), public_key)


def sha256_hex(data: str | bytes) -> str:
    """Return the SHA-256 hex digest of the provided data."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()
