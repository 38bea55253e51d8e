# src/inventory_relay/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import backups_router, expiring_router, shares_router

__all__ = [
    "backups_router",
    "expiring_router",
    "shares_router",
]
