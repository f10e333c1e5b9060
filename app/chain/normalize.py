"""
Make chain results JSON-safe: big integers become decimal strings, bytes become hex.

Responses go through normalize_chain, which renders every chain integer as a
decimal string so a field keeps one JSON type whatever its magnitude.
"""

from collections.abc import Mapping
from typing import Any

MAX_SAFE_INTEGER = 2**53 - 1


def normalize(value: Any, integers_as_strings: bool = False) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if integers_as_strings or abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Mapping):
        return {str(k): normalize(v, integers_as_strings) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(v, integers_as_strings) for v in value]
    return value


def normalize_chain(value: Any) -> Any:
    """Receipts and decoded contract outputs: every integer (not bool) becomes a decimal string."""
    return normalize(value, integers_as_strings=True)
