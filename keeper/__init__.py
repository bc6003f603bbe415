# keeper/__init__.py
"""
Keeper — hash-keyed membership registry over a pluggable key-value store.
Records which users claimed a content hash and answers membership queries.
"""

from keeper.core.types import MembershipResult, REGISTRY_KEY
from keeper.registry.membership import MembershipRegistry
from keeper.dispatch.router import MembershipService, dispatch
from keeper.storage import KeyValueStore, MemoryStore, SQLiteStore, create_storage

__version__ = "0.1.0-dev"

__all__ = [
    "MembershipResult",
    "REGISTRY_KEY",
    "MembershipRegistry",
    "MembershipService",
    "dispatch",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "create_storage",
]
