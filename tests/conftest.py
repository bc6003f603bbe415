# tests/conftest.py
from typing import Optional

import pytest

from keeper.storage import MemoryStore
from keeper.registry.membership import MembershipRegistry
from keeper.dispatch.router import MembershipService


class CountingStore(MemoryStore):
    """MemoryStore that records every call made against it."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.calls = []

    def get(self, key: str) -> Optional[bytes]:
        self.calls.append(("get", key))
        return super().get(key)

    def put(self, key: str, value: bytes) -> None:
        self.calls.append(("put", key))
        super().put(key, value)

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        super().delete(key)


class FailingStore(MemoryStore):
    """MemoryStore whose selected operations raise."""

    def __init__(self, initial=None, fail_on=()):
        super().__init__(initial)
        self.fail_on = set(fail_on)

    def get(self, key: str) -> Optional[bytes]:
        if "get" in self.fail_on:
            raise IOError("disk unavailable")
        return super().get(key)

    def put(self, key: str, value: bytes) -> None:
        if "put" in self.fail_on:
            raise IOError("disk full")
        super().put(key, value)

    def delete(self, key: str) -> None:
        if "delete" in self.fail_on:
            raise IOError("read-only")
        super().delete(key)


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def registry(store: CountingStore) -> MembershipRegistry:
    reg = MembershipRegistry(store)
    reg.initialize()
    store.calls.clear()
    return reg


@pytest.fixture
def service(registry: MembershipRegistry) -> MembershipService:
    return MembershipService(registry)
