"""
Exception types for the dispatch sync engine.
"""


class DispatchError(Exception):
    """Base class for dispatch engine errors."""
    pass


class InvalidStateError(DispatchError):
    """Raised when a value that is not a valid board state reaches the store."""
    pass


class SnapshotError(DispatchError):
    """Raised when reading or writing the durable snapshot fails."""
    pass
