"""Device attestation hook.

Assertions are not cryptographically verified yet. Requests without an
assertion are always accepted (older devices cannot produce one); requests
with one are accepted or rejected according to a single configured policy.
A real verifier can be swapped in through the ``get_attestation_verifier``
dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from inventory_relay.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Request details an assertion is bound to."""

    method: str
    path: str
    body_hash: str | None = None


@dataclass(frozen=True)
class AttestationResult:
    valid: bool
    error: str | None = None


class AttestationVerifier(Protocol):
    def verify(self, assertion: str | None, context: RequestContext) -> AttestationResult: ...


class UnverifiedAttestationVerifier:
    """Placeholder verifier that applies one policy to supplied assertions."""

    def __init__(self, reject_unverified: bool | None = None) -> None:
        if reject_unverified is None:
            reject_unverified = settings.attestation_reject_unverified
        self._reject_unverified = reject_unverified

    def verify(self, assertion: str | None, context: RequestContext) -> AttestationResult:
        if not assertion:
            return AttestationResult(valid=True)
        if self._reject_unverified:
            logger.warning("Rejecting unverifiable assertion for %s %s", context.method, context.path)
            return AttestationResult(valid=False, error="Invalid App Attest assertion")
        logger.debug("Accepting unverified assertion for %s %s", context.method, context.path)
        return AttestationResult(valid=True)


def get_attestation_verifier() -> AttestationVerifier:
    """Return the attestation verifier for dependency injection."""
    return UnverifiedAttestationVerifier()
