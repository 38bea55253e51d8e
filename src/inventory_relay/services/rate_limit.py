# src/inventory_relay/services/rate_limit.py
"""Fixed-window rate limiting backed by the key-value store.

Windows are indexed by ``floor(now_ms / window_ms)`` so a caller may spend
its full limit at the end of one window and again at the start of the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Final

from inventory_relay.core.settings import settings
from inventory_relay.db.store import KeyValueStore, StoreError, get_json, put_json
from inventory_relay.db.time import Clock, epoch_millis, from_epoch_millis, utcnow

logger = logging.getLogger(__name__)

_BOUNDARY_BUFFER_SECONDS: Final[int] = 60


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate-limit check."""

    allowed: bool
    remaining: int
    reset_at: datetime


class RateLimiter:
    """Count requests per (identifier, endpoint) in fixed windows."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utcnow,
        *,
        fail_open: bool | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._fail_open = settings.rate_limit_fail_open if fail_open is None else fail_open

    @staticmethod
    def window_key(identifier: str, endpoint: str, window_index: int) -> str:
        return f"ratelimit:{identifier}:{endpoint}:{window_index}"

    def check(
        self,
        identifier: str,
        endpoint: str,
        limit: int,
        window_minutes: int,
    ) -> RateLimitResult:
        """Count one request and report whether it is within the limit."""
        window_ms = window_minutes * 60_000
        now_ms = epoch_millis(self._clock())
        window_index = now_ms // window_ms
        reset_at = from_epoch_millis((window_index + 1) * window_ms)
        key = self.window_key(identifier, endpoint, window_index)

        try:
            document = get_json(self._store, key)
            count = int(document.get("count", 0)) if isinstance(document, dict) else 0
            if count >= limit:
                return RateLimitResult(allowed=False, remaining=0, reset_at=reset_at)
            put_json(
                self._store,
                key,
                {"count": count + 1},
                window_minutes * 60 + _BOUNDARY_BUFFER_SECONDS,
            )
        except StoreError as err:
            if not self._fail_open:
                raise
            logger.warning(
                "Rate limiting degraded for %s on %s, allowing request: %s",
                identifier,
                endpoint,
                err,
            )
            return RateLimitResult(allowed=True, remaining=limit, reset_at=reset_at)

        return RateLimitResult(allowed=True, remaining=limit - count - 1, reset_at=reset_at)
