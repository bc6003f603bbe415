# keeper/core/types.py
from enum import Enum
from typing import Dict, List

# Fixed store key holding the whole serialized registry
REGISTRY_KEY = "keeper"

# hash -> ordered, duplicate-free member list
Registry = Dict[str, List[str]]


class MembershipResult(Enum):
    """Outcome of a registry operation, encoded to bytes only at the dispatch boundary."""
    NO_OP = "no_op"            # member already recorded, nothing written
    ADDED = "added"
    FOUND = "found"
    NOT_FOUND = "not_found"

    @property
    def is_positive(self) -> bool:
        return self in (MembershipResult.ADDED, MembershipResult.FOUND)
