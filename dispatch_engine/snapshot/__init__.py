"""
Durable board snapshot.

Provides:
- Snapshot serialization and content hashing
- File-backed snapshot store with default-state fallback
"""

from .snapshot import serialize_state, deserialize_state, compute_state_hash
from .store import SnapshotStore

__all__ = [
    "serialize_state",
    "deserialize_state",
    "compute_state_hash",
    "SnapshotStore",
]
