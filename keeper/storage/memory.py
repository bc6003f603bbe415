# keeper/storage/memory.py
from typing import Dict, Optional

from . import KeyValueStore


class MemoryStore(KeyValueStore):
    """Process-local dict store. Used by tests and for embedding without a database."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Optional[Dict[str, bytes]] = dict(initial or {})

    @property
    def data(self) -> Dict[str, bytes]:
        if self._data is None:
            raise RuntimeError("Storage connection is closed")
        return self._data

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def close(self) -> None:
        self._data = None
