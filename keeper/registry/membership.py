# keeper/registry/membership.py
import logging
from typing import List

from keeper.core.types import MembershipResult, Registry, REGISTRY_KEY
from keeper.core.canon import encode_registry, decode_registry
from keeper.core.errors import StorageReadError, StorageWriteError, StorageDeleteError
from keeper.storage import KeyValueStore

log = logging.getLogger(__name__)


class MembershipRegistry:
    """
    Hash -> members registry persisted as one record under a single store key.

    Every call loads the whole record; mutating calls write the whole record back.
    The read-modify-write in record_membership is not atomic here: with a store
    that lets two cycles interleave on the same key, one addition can be lost.
    No locking or compare-and-swap is attempted.
    """

    def __init__(self, store: KeyValueStore, key: str = REGISTRY_KEY):
        self.store = store
        self.key = key

    def _load(self) -> Registry:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            raise StorageReadError(f"Failed to get state for {self.key}: {e}") from e
        return decode_registry(raw)

    def _save(self, registry: Registry) -> None:
        payload = encode_registry(registry)
        try:
            self.store.put(self.key, payload)
        except Exception as e:
            raise StorageWriteError(f"Failed to put state for {self.key}: {e}") from e

    def initialize(self) -> None:
        """Overwrite the record with an empty registry."""
        self._save({})
        log.info("Registry %r initialized", self.key)

    def record_membership(self, hash_: str, user: str) -> MembershipResult:
        """Append user to hash's member list unless already present."""
        registry = self._load()
        members = registry.setdefault(hash_, [])

        for member in members:
            if member == user:
                log.debug("User %r already recorded for %r", user, hash_)
                return MembershipResult.NO_OP

        members.append(user)
        self._save(registry)
        log.info("Recorded user %r for %r (%d members)", user, hash_, len(members))
        return MembershipResult.ADDED

    def query_membership(self, hash_: str, user: str) -> MembershipResult:
        registry = self._load()
        for member in registry.get(hash_, []):
            if member == user:
                return MembershipResult.FOUND
        return MembershipResult.NOT_FOUND

    def delete_key(self, key: str) -> None:
        """
        Delete an arbitrary top-level store key.
        This is a raw store delete, not removal of a hash or member.
        """
        try:
            self.store.delete(key)
        except Exception as e:
            raise StorageDeleteError(f"Failed to delete state for {key}: {e}") from e
        log.info("Deleted store key %r", key)

    def members(self, hash_: str) -> List[str]:
        """Ordered member list for hash (empty when the hash is unknown)."""
        return list(self._load().get(hash_, []))

    def snapshot(self) -> Registry:
        """Copy of the whole decoded registry."""
        return {h: list(m) for h, m in self._load().items()}
