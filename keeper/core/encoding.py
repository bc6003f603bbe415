# keeper/core/encoding.py
from typing import Optional

from keeper.core.types import MembershipResult

TRUE_BYTE = b"\x01"
FALSE_BYTE = b"\x00"


def encode_result(result: Optional[MembershipResult]) -> bytes:
    """Single-byte wire payload; operations with no result produce an empty payload."""
    if result is None:
        return b""
    return TRUE_BYTE if result.is_positive else FALSE_BYTE


def decode_flag(payload: bytes) -> Optional[bool]:
    """Inverse view for callers: True/False for a flag byte, None for an empty payload."""
    if not payload:
        return None
    if payload not in (TRUE_BYTE, FALSE_BYTE):
        raise ValueError(f"Not a result payload: {payload!r}")
    return payload == TRUE_BYTE
