# keeper/storage/__init__.py
"""
Key-value stores backing the registry.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pathlib import Path


class KeyValueStore(ABC):
    """Abstract single-key store: Get/Put/Delete with single-key atomicity, nothing more."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the key; removing an absent key is not an error."""

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_storage(uri: str) -> KeyValueStore:
    if uri.startswith("sqlite://"):
        from .sqlite import SQLiteStore
        raw_path = uri[len("sqlite://"):]
        if not raw_path:
            raise ValueError(f"Missing database path in storage URI: {uri}")
        return SQLiteStore(Path(raw_path).resolve())

    elif uri == "memory:":
        from .memory import MemoryStore
        return MemoryStore()
    else:
        raise ValueError(f"Unsupported storage URI: {uri}")


from .memory import MemoryStore
from .sqlite import SQLiteStore

__all__ = ["KeyValueStore", "create_storage", "MemoryStore", "SQLiteStore"]
