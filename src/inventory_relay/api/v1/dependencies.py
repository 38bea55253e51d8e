"""Shared API dependencies for stores, rate limiting and attestation."""

import logging
from typing import Annotated

from fastapi import Depends, Header, Request, Response

from inventory_relay.core.errors import AttestationError, RateLimitError
from inventory_relay.core.security import sha256_hex
from inventory_relay.core.settings import settings
from inventory_relay.db.session import get_clock, get_store
from inventory_relay.db.store import KeyValueStore
from inventory_relay.db.time import Clock
from inventory_relay.services.aliases import AliasStore
from inventory_relay.services.attestation import (
    AttestationVerifier,
    RequestContext,
    get_attestation_verifier,
)
from inventory_relay.services.backups import BackupStore
from inventory_relay.services.key_registry import KeyRegistry
from inventory_relay.services.rate_limit import RateLimiter, RateLimitResult
from inventory_relay.services.shares import ShareStore

logger = logging.getLogger(__name__)

StoreDep = Annotated[KeyValueStore, Depends(get_store)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def get_client_address(request: Request) -> str:
    """Return the originating client address, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    for header in ("CF-Connecting-IP", "X-Real-IP", "X-Client-IP"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    if request.client:
        return request.client.host
    return "unknown"


ClientAddressDep = Annotated[str, Depends(get_client_address)]


def get_share_store(store: StoreDep, clock: ClockDep) -> ShareStore:
    return ShareStore(store, clock)


ShareStoreDep = Annotated[ShareStore, Depends(get_share_store)]


def get_alias_store(store: StoreDep, shares: ShareStoreDep, clock: ClockDep) -> AliasStore:
    return AliasStore(store, shares, clock)


def get_key_registry(store: StoreDep, clock: ClockDep) -> KeyRegistry:
    return KeyRegistry(store, clock)


KeyRegistryDep = Annotated[KeyRegistry, Depends(get_key_registry)]


def get_backup_store(store: StoreDep, registry: KeyRegistryDep, clock: ClockDep) -> BackupStore:
    return BackupStore(store, registry, clock)


def get_rate_limiter(store: StoreDep, clock: ClockDep) -> RateLimiter:
    return RateLimiter(store, clock)


AliasStoreDep = Annotated[AliasStore, Depends(get_alias_store)]
BackupStoreDep = Annotated[BackupStore, Depends(get_backup_store)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
AttestationVerifierDep = Annotated[AttestationVerifier, Depends(get_attestation_verifier)]


class RateLimit:
    """Dependency enforcing the configured per-address limit for one endpoint."""

    def __init__(self, endpoint: str) -> None:
        if endpoint not in settings.rate_limits:
            raise ValueError(f"No rate limit configured for {endpoint}")
        self.endpoint = endpoint

    def __call__(
        self,
        response: Response,
        limiter: RateLimiterDep,
        client_address: ClientAddressDep,
    ) -> RateLimitResult | None:
        if not settings.rate_limit_enabled:
            return None
        limit = settings.rate_limits[self.endpoint]
        result = limiter.check(
            client_address,
            self.endpoint,
            limit,
            settings.rate_limit_window_minutes,
        )
        if not result.allowed:
            logger.warning("Rate limit exceeded for %s on %s", client_address, self.endpoint)
            raise RateLimitError(result.reset_at)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return result


async def require_attestation(
    request: Request,
    verifier: AttestationVerifierDep,
    x_apple_assertion: Annotated[str | None, Header()] = None,
) -> None:
    """Run the configured attestation verifier against the request."""
    body = await request.body()
    context = RequestContext(
        method=request.method,
        path=request.url.path,
        body_hash=sha256_hex(body) if body else None,
    )
    result = verifier.verify(x_apple_assertion, context)
    if not result.valid:
        raise AttestationError(result.error or "Invalid app attestation")


AttestationDep = Depends(require_attestation)
OwnershipSignature = Annotated[str | None, Header(alias="X-Ownership-Signature")]
