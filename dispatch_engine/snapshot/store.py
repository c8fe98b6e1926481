"""
File-backed snapshot storage.

A single JSON file holds the latest board state. Every save overwrites it
wholesale: the new content goes to a temp file in the same directory, is
fsynced, then atomically replaces the snapshot.
"""

import logging
import os
import tempfile

from ..core.errors import InvalidStateError, SnapshotError
from ..core.state import BoardState, default_state
from .snapshot import deserialize_state, serialize_state

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Durable read/write of one board snapshot.

    Guarantees:
    - Overwrite semantics (no append log)
    - Fsync before the file is swapped in (durability)
    - A reader never sees a half-written snapshot
    """

    def __init__(self, path: str) -> None:
        """
        Initialize snapshot store.

        Args:
            path: Path to the JSON snapshot file
        """
        self.path = path

    def save(self, state: BoardState) -> bool:
        """
        Write state to disk, replacing the previous snapshot.

        Failures are logged, not raised: the in-memory state stays the
        source of truth for the running process.

        Returns:
            True if the snapshot was durably written
        """
        try:
            self._write(serialize_state(state))
        except (TypeError, ValueError, SnapshotError) as ex:
            logger.error("Error saving snapshot to %s: %s", self.path, ex)
            return False
        return True

    def load(self) -> BoardState:
        """
        Read the snapshot, falling back to the default state.

        A missing, unreadable or corrupt file yields default_state().
        """
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            logger.warning("Snapshot %s not found, using default state", self.path)
            return default_state()
        except OSError as ex:
            logger.error("Error reading snapshot %s: %s", self.path, ex)
            return default_state()

        try:
            return deserialize_state(data)
        except (ValueError, InvalidStateError) as ex:
            logger.error("Corrupt snapshot %s, using default state: %s", self.path, ex)
            return default_state()

    def reset(self) -> bool:
        """Overwrite the snapshot with the default state."""
        return self.save(default_state())

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def _write(self, data: bytes) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{os.path.basename(self.path)}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as ex:
            raise SnapshotError(str(ex)) from ex
        finally:
            if tmp_path is not None:
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
