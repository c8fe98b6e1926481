"""
Identifier generation.

New doctors and locations get ids derived from the nonce carried by the
action that creates them. The nonce is random (generated when the action is
received), the derivation is deterministic, so the reducer stays a pure
function of (state, action).
"""

import hashlib
import uuid
from typing import Container


def new_nonce() -> str:
    """Random 128-bit nonce as hex."""
    return uuid.uuid4().hex


def stable_id(*parts: str) -> str:
    """
    Generate stable ID derived from inputs (no randomness).

    Example:
        stable_id("doctor", "3f2a...") -> "9c1e..."
    """
    raw = "|".join(parts).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def derive_id(kind: str, nonce: str, taken: Container[str], length: int = 16) -> str:
    """
    Derive an entity id from an action nonce, skipping ids already in use.

    Args:
        kind: Entity kind ("doctor", "location")
        nonce: Nonce of the creating action
        taken: Ids that must not be returned
        length: Hex characters kept from the digest

    Returns:
        Id not contained in taken
    """
    candidate = stable_id(kind, nonce)[:length]
    attempt = 0
    while candidate in taken:
        attempt += 1
        candidate = stable_id(kind, nonce, str(attempt))[:length]
    return candidate
