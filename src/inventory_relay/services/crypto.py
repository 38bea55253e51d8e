# src/inventory_relay/services/crypto.py
"""Cryptographic services for Inventory Relay."""

from __future__ import annotations

import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from inventory_relay.core.security import PUBKEY_LENGTH_BYTES, decode_base64, verify_ownership


class CryptoService:
    """Service handling key validation and ownership proofs."""

    @staticmethod
    def validate_public_key(public_key_b64: str) -> bytes:
        """Validate and decode a base64 Ed25519 public key.

        Raises:
            ValueError: If the key is not base64 or not a 32-byte Ed25519 key.
        """
        decoded = decode_base64(public_key_b64)
        if decoded is None:
            raise ValueError("Invalid public key format: not base64")
        if len(decoded) != PUBKEY_LENGTH_BYTES:
            raise ValueError("Invalid public key format: Ed25519 public keys must be 32 bytes")
        try:
            Ed25519PublicKey.from_public_bytes(decoded)
        except ValueError as err:
            raise ValueError(f"Invalid public key format: {err}") from err
        return decoded

    @staticmethod
    def verify_ownership(signature_b64: str | None, identifier: str, public_key_b64: str) -> bool:
        """Return True if ``signature_b64`` signs ``identifier`` under the stored key."""
        return verify_ownership(signature_b64, identifier, public_key_b64)

    @staticmethod
    def generate_key_pair() -> tuple[bytes, str]:
        """Generate a new Ed25519 key pair.

        Returns:
            Tuple of (raw private key bytes, base64 public key)
        """
        private_key = Ed25519PrivateKey.generate()
        private_raw = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_raw = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return private_raw, base64.b64encode(public_raw).decode()

    @staticmethod
    def sign_identifier(private_key_bytes: bytes, identifier: str) -> str:
        """Produce the base64 ownership signature a client sends for ``identifier``."""
        try:
            private_key = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
        except ValueError as err:
            raise ValueError(f"Invalid private key: {err}") from err
        return base64.b64encode(private_key.sign(identifier.encode("utf-8"))).decode()


crypto_service = CryptoService()
