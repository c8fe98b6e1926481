"""
Reducer: pure state transition functions.

The reducer must be:
- Pure (no side effects, no I/O)
- Deterministic (same state and action -> same output)
- Total (unknown or malformed actions return the state unchanged)
"""

from typing import Callable, Dict, Union

from .actions import Action, ActionType
from .state import BoardState

# Handler signature: (current_state, action) -> new_state
Handler = Callable[[BoardState, Action], BoardState]


class Reducer:
    """
    Registry of action handlers.

    Usage:
        reducer = Reducer()
        reducer.register(ActionType.ADD_DOCTOR, on_add_doctor)
        new_state = reducer.apply(state, action)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, action_type: Union[ActionType, str], handler: Handler) -> None:
        """
        Register action handler.

        Args:
            action_type: Action kind
            handler: Pure function (current_state, action) -> new_state
        """
        key = action_type.value if isinstance(action_type, ActionType) else action_type
        self._handlers[key] = handler

    def handles(self, action_type: Union[ActionType, str]) -> bool:
        key = action_type.value if isinstance(action_type, ActionType) else action_type
        return key in self._handlers

    def missing(self) -> list:
        """Recognized action kinds with no registered handler."""
        return [t for t in ActionType if t.value not in self._handlers]

    def apply(self, state: BoardState, action: Action) -> BoardState:
        """
        Apply action to state using its registered handler.

        Unknown action types are a no-op: the input state is returned as is.

        Returns:
            New state with action applied
        """
        handler = self._handlers.get(action.type)
        if handler is None:
            return state
        return handler(state, action)
