"""
Action model for board state transitions.

Actions are immutable requests to transform the board. The set of kinds is
closed (ActionType); a message with any other type still becomes an Action
and is applied as a no-op, so older servers tolerate newer clients.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .ids import new_nonce


class ActionType(str, Enum):
    LOAD_DATA = "LOAD_DATA"
    ADD_DOCTOR = "ADD_DOCTOR"
    UPDATE_DOCTOR = "UPDATE_DOCTOR"
    DELETE_DOCTOR = "DELETE_DOCTOR"
    ADD_LOCATION = "ADD_LOCATION"
    UPDATE_LOCATION = "UPDATE_LOCATION"
    DELETE_LOCATION = "DELETE_LOCATION"
    MOVE_DOCTOR = "MOVE_DOCTOR"
    REMOVE_DOCTOR_FROM_LOCATION = "REMOVE_DOCTOR_FROM_LOCATION"


@dataclass(frozen=True)
class Action:
    """
    Immutable action record.

    Fields:
        type: Action kind (one of ActionType for recognized actions)
        payload: Kind-specific data, as sent by the client
        nonce: Random value new entity ids are derived from
        seq: Position in the server's global order (assigned on receipt)
    """
    type: str
    payload: Any = None
    nonce: str = field(default_factory=new_nonce)
    seq: Optional[int] = None

    @property
    def kind(self) -> Optional[ActionType]:
        """Recognized action kind, or None for unknown types."""
        try:
            return ActionType(self.type)
        except ValueError:
            return None

    @classmethod
    def from_message(cls, message: Any, seq: Optional[int] = None) -> "Action":
        """
        Build an action from a client message ({"type": ..., "payload": ...}).

        Never raises: a malformed message becomes an action of empty type,
        which the reducer ignores.
        """
        if not isinstance(message, dict):
            return cls(type="", payload=None, seq=seq)
        action_type = message.get("type")
        if not isinstance(action_type, str):
            action_type = ""
        return cls(type=action_type, payload=message.get("payload"), seq=seq)
