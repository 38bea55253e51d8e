# src/inventory_relay/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .backups import router as backups_router
from .expiring import router as expiring_router
from .shares import router as shares_router

__all__ = [
    "backups_router",
    "expiring_router",
    "shares_router",
]
