"""
Board state serialization.

The durable snapshot is one JSON document with exactly the state shape
({doctors, locations, assignments}). It is written indented so the file
stays readable and hand-editable; hashing uses canonical JSON.
"""

import hashlib
import json

from ..core.canonical import canonical_json_bytes
from ..core.state import BoardState


def serialize_state(state: BoardState) -> bytes:
    """
    Serialize state to snapshot bytes (indented JSON, non-ASCII escaped).

    Raises:
        TypeError, ValueError: If a record holds a non-JSON value
    """
    return json.dumps(state.to_dict(), indent=2).encode("utf-8")


def deserialize_state(data: bytes) -> BoardState:
    """
    Parse snapshot bytes into a (normalized) state.

    Raises:
        ValueError: If data is not valid JSON
        InvalidStateError: If the document is not an object
    """
    return BoardState.from_dict(json.loads(data))


def compute_state_hash(state: BoardState) -> str:
    """
    SHA-256 over the canonical JSON of the state.

    Equal content always gives the same hash, whatever the dict ordering.
    """
    return hashlib.sha256(canonical_json_bytes(state.to_dict())).hexdigest()
