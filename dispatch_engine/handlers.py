"""
Reducer handlers for the dispatch board.

All handlers are pure and deterministic. A handler that finds its action
malformed, or pointing at an id that does not exist, returns the input state
unchanged.
"""

from typing import Any, Dict, List, Optional

from .core.actions import Action, ActionType
from .core.ids import derive_id
from .core.reducer import Reducer
from .core.state import BoardState, LocationType, ident


def register_handlers(reducer: Reducer) -> None:
    reducer.register(ActionType.LOAD_DATA, on_load_data)
    reducer.register(ActionType.ADD_DOCTOR, on_add_doctor)
    reducer.register(ActionType.UPDATE_DOCTOR, on_update_doctor)
    reducer.register(ActionType.DELETE_DOCTOR, on_delete_doctor)
    reducer.register(ActionType.ADD_LOCATION, on_add_location)
    reducer.register(ActionType.UPDATE_LOCATION, on_update_location)
    reducer.register(ActionType.DELETE_LOCATION, on_delete_location)
    reducer.register(ActionType.MOVE_DOCTOR, on_move_doctor)
    reducer.register(ActionType.REMOVE_DOCTOR_FROM_LOCATION, on_remove_doctor_from_location)


def build_reducer() -> Reducer:
    """
    Reducer with every board handler registered.

    Raises:
        RuntimeError: If an ActionType has no handler
    """
    reducer = Reducer()
    register_handlers(reducer)
    missing = reducer.missing()
    if missing:
        raise RuntimeError(f"No handler for action types: {[t.value for t in missing]}")
    return reducer


def _text(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _target_id(payload: Any) -> Optional[str]:
    # Delete actions carry the bare id; {"id": ...} is accepted too.
    if isinstance(payload, dict):
        return ident(payload.get("id"))
    return ident(payload)


def _without(assignments: Dict[str, List[str]], doctor_id: str) -> Dict[str, List[str]]:
    return {
        location_id: [d for d in doctor_ids if d != doctor_id]
        for location_id, doctor_ids in assignments.items()
    }


def on_load_data(state: BoardState, action: Action) -> BoardState:
    if not isinstance(action.payload, dict):
        return state
    return BoardState.from_dict(action.payload)


def on_add_doctor(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    name = _text(payload, "name")
    specialty = _text(payload, "specialty")
    if name is None or specialty is None:
        return state

    doctor = {
        "id": derive_id("doctor", action.nonce, set(state.doctor_ids())),
        "name": name,
        "specialty": specialty,
    }
    return BoardState(
        doctors=state.doctors + [doctor],
        locations=state.locations,
        assignments=state.assignments,
    )


def on_update_doctor(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    doctor_id = ident(payload.get("id"))
    if state.get_doctor(doctor_id) is None:
        return state

    doctors = [
        {**d, **payload, "id": d["id"]} if d["id"] == doctor_id else d
        for d in state.doctors
    ]
    return BoardState(doctors=doctors, locations=state.locations, assignments=state.assignments)


def on_delete_doctor(state: BoardState, action: Action) -> BoardState:
    doctor_id = _target_id(action.payload)
    if state.get_doctor(doctor_id) is None:
        return state

    return BoardState(
        doctors=[d for d in state.doctors if d["id"] != doctor_id],
        locations=state.locations,
        assignments=_without(state.assignments, doctor_id),
    )


def on_add_location(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    name = _text(payload, "name")
    location_type = payload.get("type")
    if name is None or location_type not in LocationType.values():
        return state

    taken = set(state.location_ids()) | set(state.assignments)
    location = {
        "id": derive_id("location", action.nonce, taken),
        "name": name,
        "type": location_type,
    }
    assignments = dict(state.assignments)
    assignments[location["id"]] = []
    return BoardState(
        doctors=state.doctors,
        locations=state.locations + [location],
        assignments=assignments,
    )


def on_update_location(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    location_id = ident(payload.get("id"))
    if state.get_location(location_id) is None:
        return state

    changes = dict(payload)
    if "type" in changes and changes["type"] not in LocationType.values():
        del changes["type"]

    locations = [
        {**loc, **changes, "id": loc["id"]} if loc["id"] == location_id else loc
        for loc in state.locations
    ]
    return BoardState(doctors=state.doctors, locations=locations, assignments=state.assignments)


def on_delete_location(state: BoardState, action: Action) -> BoardState:
    location_id = _target_id(action.payload)
    if state.get_location(location_id) is None:
        return state

    assignments = {k: v for k, v in state.assignments.items() if k != location_id}
    return BoardState(
        doctors=state.doctors,
        locations=[loc for loc in state.locations if loc["id"] != location_id],
        assignments=assignments,
    )


def on_move_doctor(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    doctor_id = ident(payload.get("doctorId"))
    if state.get_doctor(doctor_id) is None:
        return state

    # The destination entry is the only validity gate: an unknown
    # destination leaves the doctor unassigned. "source" is informational.
    destination = ident(payload.get("destination"))
    assignments = _without(state.assignments, doctor_id)
    if destination in assignments:
        assignments[destination] = assignments[destination] + [doctor_id]
    return BoardState(doctors=state.doctors, locations=state.locations, assignments=assignments)


def on_remove_doctor_from_location(state: BoardState, action: Action) -> BoardState:
    payload = action.payload
    if not isinstance(payload, dict):
        return state
    doctor_id = ident(payload.get("doctorId"))
    location_id = ident(payload.get("locationId"))
    current = state.assignments.get(location_id)
    if current is None or doctor_id not in current:
        return state

    assignments = dict(state.assignments)
    assignments[location_id] = [d for d in current if d != doctor_id]
    return BoardState(doctors=state.doctors, locations=state.locations, assignments=assignments)


_default_reducer = build_reducer()


def apply(state: BoardState, action: Action) -> BoardState:
    """Apply action with the default board reducer."""
    return _default_reducer.apply(state, action)
