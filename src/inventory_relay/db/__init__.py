# src/inventory_relay/db/__init__.py
"""Storage configuration and utilities."""

from .session import get_clock, get_store
from .store import KeyValueStore, StoreError

__all__ = ["get_store", "get_clock", "KeyValueStore", "StoreError"]
