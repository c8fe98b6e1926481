"""
Canonical store: the single live board state of the process.

Only the session manager commits to it, always with a state produced by the
reducer. No locking: commits are serialized by the session manager.
"""

from dispatch_engine.core.errors import InvalidStateError
from dispatch_engine.core.state import BoardState
from dispatch_engine.snapshot import compute_state_hash


class CanonicalStore:
    """
    Holds exactly one live BoardState.

    Fields:
        version: Number of commits since the store was created
    """

    def __init__(self, initial: BoardState) -> None:
        if not isinstance(initial, BoardState):
            raise InvalidStateError(f"expected BoardState, got {type(initial).__name__}")
        self._state = initial
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def current(self) -> BoardState:
        """The live state; its containers must not be mutated in place."""
        return self._state

    def commit(self, next_state: BoardState) -> int:
        """
        Replace the live state.

        The reference is swapped only once next_state is fully built, so no
        partially applied state is ever observable.

        Returns:
            New version number

        Raises:
            InvalidStateError: If next_state is not a BoardState
        """
        if not isinstance(next_state, BoardState):
            raise InvalidStateError(f"expected BoardState, got {type(next_state).__name__}")
        self._state = next_state
        self._version += 1
        return self._version

    def state_hash(self) -> str:
        return compute_state_hash(self._state)
