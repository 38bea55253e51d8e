# tests/test_signature.py
"""Tests for Ed25519 ownership signatures."""

import base64

import pytest
from nacl.signing import SigningKey

from inventory_relay.core.security import decode_base64, verify_ownership, verify_signature
from inventory_relay.services.crypto import CryptoService


def test_verify_signature_accepts_valid_signature() -> None:
    key = SigningKey.generate()
    signed = key.sign(b"ABC123")
    assert verify_signature(signed.signature, b"ABC123", bytes(key.verify_key)) is True


def test_verify_signature_rejects_bad_inputs() -> None:
    """Wrong lengths resolve to False instead of raising."""
    assert verify_signature(b"\x00" * 10, b"msg", b"\x00" * 32) is False
    assert verify_signature(b"\x00" * 64, b"msg", b"\x00" * 5) is False


def test_verify_signature_rejects_other_message() -> None:
    key = SigningKey.generate()
    signature = key.sign(b"ABC123").signature
    assert verify_signature(signature, b"ABC124", bytes(key.verify_key)) is False


def test_verify_ownership_with_base64_inputs(identity) -> None:
    assert verify_ownership(identity.sign("ABC123"), "ABC123", identity.public_key) is True
    assert verify_ownership(identity.sign("XYZ789"), "ABC123", identity.public_key) is False


def test_verify_ownership_against_wrong_key(identity, other_identity) -> None:
    signature = identity.sign("ABC123")
    assert verify_ownership(signature, "ABC123", other_identity.public_key) is False


@pytest.mark.parametrize("signature", [None, "", "%%%not-base64%%%"])
def test_verify_ownership_malformed_signature(identity, signature) -> None:
    assert verify_ownership(signature, "ABC123", identity.public_key) is False


def test_decode_base64_accepts_urlsafe_without_padding() -> None:
    raw = bytes(range(250, 256)) + b"\xfb\xff"
    encoded = base64.urlsafe_b64encode(raw).decode().rstrip("=")
    assert decode_base64(encoded) == raw


class TestCryptoService:
    """Key validation and signing helpers."""

    def test_validate_public_key_round_trip(self) -> None:
        _, public_key = CryptoService.generate_key_pair()
        assert len(CryptoService.validate_public_key(public_key)) == 32

    def test_validate_public_key_rejects_short_key(self) -> None:
        with pytest.raises(ValueError, match="32 bytes"):
            CryptoService.validate_public_key(base64.b64encode(b"x" * 16).decode())

    def test_signed_identifier_verifies(self) -> None:
        private_key, public_key = CryptoService.generate_key_pair()
        signature = CryptoService.sign_identifier(private_key, "ABC-DEF-234")
        assert CryptoService.verify_ownership(signature, "ABC-DEF-234", public_key) is True
        assert CryptoService.verify_ownership(signature, "ABC-DEF-235", public_key) is False


def test_verify_ownership_rejects_junk_laced_signature(identity) -> None:
    signature = identity.sign("ABC123")
    laced = "!" + signature[:10] + "*#" + signature[10:] + "!!"
    assert decode_base64(laced) is None
    assert verify_ownership(laced, "ABC123", identity.public_key) is False


def test_decode_base64_rejects_junk_in_urlsafe_input() -> None:
    encoded = base64.urlsafe_b64encode(b"\xfb\xff\xfe" * 4).decode()
    assert decode_base64(encoded) == b"\xfb\xff\xfe" * 4
    assert decode_base64(encoded[:4] + "$" + encoded[4:]) is None


def test_validate_public_key_rejects_junk_laced_key(identity) -> None:
    with pytest.raises(ValueError, match="not base64"):
        CryptoService.validate_public_key("$" + identity.public_key + "$$")
