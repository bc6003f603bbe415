# keeper/verify/verifier.py
import json
from typing import List, Optional
from dataclasses import dataclass

from keeper.core.canon import has_lone_surrogate, replace_lone_surrogates
from keeper.core.types import REGISTRY_KEY
from keeper.storage import KeyValueStore


@dataclass
class VerificationFailure:
    hash: Optional[str]
    message: str
    category: str = "general"  # "missing", "decode", "shape", "duplicate", "storage"


@dataclass
class VerificationResult:
    is_valid: bool
    message: str = ""
    failures: List[VerificationFailure] = None
    hash_count: int = 0
    member_count: int = 0

    def __post_init__(self):
        if self.failures is None:
            self.failures = []

    @property
    def first_failure(self) -> Optional[VerificationFailure]:
        return self.failures[0] if self.failures else None

    def fail(self, hash_: Optional[str], message: str, category: str) -> None:
        self.failures.append(VerificationFailure(hash_, message, category))
        self.is_valid = False

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return f"Registry is valid ✓ ({self.hash_count} hashes, {self.member_count} members)"
        lines = [f"Verification FAILED ({len(self.failures)} issues):"]
        for f in self.failures:
            where = f.hash if f.hash is not None else "-"
            lines.append(f"  • [{where}] {f.category}: {f.message}")
        return "\n".join(lines)


class RegistryVerifier:
    """
    Offline audit of a persisted registry record.
    Stricter than the runtime decoder: reports every problem instead of stopping at the first.
    """

    def __init__(self, key: str = REGISTRY_KEY):
        self.key = key

    def verify(self, raw: Optional[bytes]) -> VerificationResult:
        result = VerificationResult(True)

        if not raw:
            result.fail(None, f"No record stored under {self.key!r}", "missing")
            return result

        # 1. Decoding
        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as e:
            result.fail(None, f"Record is not valid JSON: {e}", "decode")
            return result

        if data is None:
            data = {}
        if not isinstance(data, dict):
            result.fail(None, f"Top level must be an object, got {type(data).__name__}", "shape")
            return result

        # 2. Shape + duplicate-freedom per hash
        for raw_hash, members in data.items():
            hash_ = replace_lone_surrogates(raw_hash)
            if has_lone_surrogate(raw_hash):
                result.fail(hash_, f"Hash {raw_hash!r} contains an unpaired surrogate", "shape")
            if members is None:
                continue
            if not isinstance(members, list):
                result.fail(hash_, f"Members must be a list, got {type(members).__name__}", "shape")
                continue

            seen = set()
            for i, member in enumerate(members):
                if not isinstance(member, str):
                    result.fail(hash_, f"Member {i} is not a string: {member!r}", "shape")
                    continue
                if has_lone_surrogate(member):
                    result.fail(hash_, f"Member {i} contains an unpaired surrogate: {member!r}", "shape")
                if member in seen:
                    result.fail(hash_, f"Duplicate member {member!r} at position {i}", "duplicate")
                seen.add(member)

            result.hash_count += 1
            result.member_count += len(members)

        result.message = "Valid registry" if result.is_valid else f"Failed with {len(result.failures)} issues"
        return result

    def verify_from_store(self, store: KeyValueStore) -> VerificationResult:
        """Read the record from a store and verify it; read failures become a result, not an exception."""
        try:
            raw = store.get(self.key)
        except Exception as e:
            return VerificationResult(
                False,
                f"Failed to read {self.key!r} from storage: {str(e)}",
                [VerificationFailure(None, str(e), "storage")]
            )
        return self.verify(raw)
