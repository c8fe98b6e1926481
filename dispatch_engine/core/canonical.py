"""
Canonical serialization for board states.

Two states with the same content must serialize to the same bytes regardless
of dict insertion order, so hashing and equality checks on snapshots go
through these functions.
"""

import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested dict/list to canonical form.

    Rules:
    - dict keys sorted
    - tuples converted to lists
    - list order preserved (assignment order is meaningful for display)
    """
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic compact JSON bytes (sorted keys, no whitespace).

    Non-ASCII characters are \\u-escaped, so strings holding lone
    surrogates (valid in JSON text) still encode.
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"))
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Same as canonical_json_bytes but returns str."""
    return canonical_json_bytes(obj).decode("utf-8")
