# keeper/core/canon.py
import json
import re
from typing import Any, Optional

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

from keeper.core.types import Registry
from keeper.core.errors import SerializationError, DeserializationError

_SURROGATE = re.compile("[\ud800-\udfff]")


def canonical_json(obj: Any) -> bytes:
    """
    Produce deterministic UTF-8 bytes according to RFC 8785 (JSON Canonicalization Scheme).
    Sorted keys, no insignificant whitespace.
    """
    return jcs.canonicalize(obj)


def has_lone_surrogate(s: str) -> bool:
    return _SURROGATE.search(s) is not None


def replace_lone_surrogates(s: str) -> str:
    """Map each unpaired UTF-16 surrogate to U+FFFD; such strings cannot be written back as JSON."""
    if not has_lone_surrogate(s):
        return s
    return s.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def encode_registry(registry: Registry) -> bytes:
    """Serialize the full registry to its persisted form."""
    try:
        return canonical_json(registry)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to marshal keeper: {e}") from e


def decode_registry(raw: Optional[bytes]) -> Registry:
    """
    Parse a persisted registry.

    A missing or empty value is an error, not an empty registry: the record
    only exists after initialization. A JSON ``null`` decodes to ``{}``.
    Unpaired surrogate escapes (e.g. ``"\\ud800"``) decode to U+FFFD.
    """
    if not raw:
        raise DeserializationError("Failed to unmarshal keeper: no record stored")

    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise DeserializationError(f"Failed to unmarshal keeper: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DeserializationError(
            f"Failed to unmarshal keeper: expected object, got {type(data).__name__}"
        )

    registry: Registry = {}
    for hash_, members in data.items():
        if members is None:
            registry[replace_lone_surrogates(hash_)] = []
            continue
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise DeserializationError(
                f"Failed to unmarshal keeper: members of {hash_!r} must be a list of strings"
            )
        registry[replace_lone_surrogates(hash_)] = [replace_lone_surrogates(m) for m in members]
    return registry
