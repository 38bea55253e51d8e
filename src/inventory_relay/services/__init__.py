# src/inventory_relay/services/__init__.py
"""Service layer for shares, aliases, backups and rate limiting."""

from .aliases import AliasStore
from .backups import BackupStore
from .key_registry import KeyRegistry
from .rate_limit import RateLimiter, RateLimitResult
from .shares import ResolvedShare, ShareStore

__all__ = [
    "AliasStore",
    "BackupStore",
    "KeyRegistry",
    "RateLimiter",
    "RateLimitResult",
    "ResolvedShare",
    "ShareStore",
]
