"""
Core deterministic primitives.

This module provides the foundational abstractions for board state management:
- Action: Immutable transition requests
- BoardState: Current board state
- Reducer: Pure functions for state transitions
- Canonical: Deterministic serialization
- IDs: Collision-free identifier derivation
"""

from .actions import Action, ActionType
from .state import BoardState, LocationType, default_state, ident
from .reducer import Reducer
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .ids import derive_id, new_nonce, stable_id
from .errors import DispatchError, InvalidStateError, SnapshotError

__all__ = [
    "Action",
    "ActionType",
    "BoardState",
    "LocationType",
    "default_state",
    "ident",
    "Reducer",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "derive_id",
    "new_nonce",
    "stable_id",
    "DispatchError",
    "InvalidStateError",
    "SnapshotError",
]
