"""
Board state model.

BoardState is the single unit of truth: doctors, locations and the
assignment table mapping each location id to the ordered list of doctor ids
placed there. It is replaced wholesale on every reducer application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import InvalidStateError


class LocationType(str, Enum):
    REPOS = "repos"
    INTERVENTION = "intervention"
    ABSENT = "absent"
    OTHER = "other"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


def ident(value: Any) -> Optional[str]:
    """
    Normalize an identifier to its string form.

    Older snapshots and clients use numeric ids; assignment table keys are
    always strings in JSON, so every id is compared as a string.

    Returns:
        String id, or None if value cannot be an id
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, str)):
        s = str(value)
        return s or None
    return None


@dataclass(frozen=True)
class BoardState:
    """
    Immutable board state.

    Fields:
        doctors: List of doctor records ({"id", "name", "specialty", ...})
        locations: List of location records ({"id", "name", "type", ...})
        assignments: location_id -> ordered list of doctor ids

    Invariants (kept by the reducer, restored by from_dict):
        - a doctor id appears in at most one assignment list
        - assignment keys are exactly the location ids
        - every assigned doctor id refers to an existing doctor

    The dataclass is frozen but its containers are plain lists and dicts,
    shared between successive states. Treat them as read-only: handlers
    build new containers, and to_dict() returns detached copies for
    anything that leaves the process.
    """
    doctors: List[Dict[str, Any]] = field(default_factory=list)
    locations: List[Dict[str, Any]] = field(default_factory=list)
    assignments: Dict[str, List[str]] = field(default_factory=dict)

    @staticmethod
    def initial() -> "BoardState":
        return default_state()

    def doctor_ids(self) -> List[str]:
        return [d["id"] for d in self.doctors]

    def location_ids(self) -> List[str]:
        return [loc["id"] for loc in self.locations]

    def get_doctor(self, doctor_id: Any) -> Optional[Dict[str, Any]]:
        key = ident(doctor_id)
        for doctor in self.doctors:
            if doctor["id"] == key:
                return doctor
        return None

    def get_location(self, location_id: Any) -> Optional[Dict[str, Any]]:
        key = ident(location_id)
        for location in self.locations:
            if location["id"] == key:
                return location
        return None

    def location_of(self, doctor_id: Any) -> Optional[str]:
        """Return the location id a doctor is assigned to, or None."""
        key = ident(doctor_id)
        for location_id, doctor_ids in self.assignments.items():
            if key in doctor_ids:
                return location_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "doctors": [dict(d) for d in self.doctors],
            "locations": [dict(loc) for loc in self.locations],
            "assignments": {k: list(v) for k, v in self.assignments.items()},
        }

    @staticmethod
    def from_dict(data: Any) -> "BoardState":
        """
        Build a state from its JSON shape, repairing invariant violations.

        Duplicate doctor/location ids keep their first record. Assignment
        entries are created for locations that lack one and dropped for
        unknown locations. Unknown doctor ids are dropped, and a doctor
        listed in several entries keeps only its first placement (locations
        in declaration order).

        Raises:
            InvalidStateError: If data is not a JSON object
        """
        if not isinstance(data, dict):
            raise InvalidStateError(f"state must be an object, got {type(data).__name__}")

        doctors = _records(data.get("doctors"))
        locations = _records(data.get("locations"))

        raw_assignments = data.get("assignments")
        if not isinstance(raw_assignments, dict):
            raw_assignments = {}
        by_location: Dict[str, Any] = {}
        for raw_key, entry in raw_assignments.items():
            key = ident(raw_key)
            if key is not None and key not in by_location:
                by_location[key] = entry

        known_doctors = {d["id"] for d in doctors}
        placed = set()
        assignments: Dict[str, List[str]] = {}
        for location in locations:
            entry = by_location.get(location["id"])
            ids: List[str] = []
            if isinstance(entry, list):
                for raw_id in entry:
                    doctor_id = ident(raw_id)
                    if doctor_id in known_doctors and doctor_id not in placed:
                        placed.add(doctor_id)
                        ids.append(doctor_id)
            assignments[location["id"]] = ids

        return BoardState(doctors=doctors, locations=locations, assignments=assignments)


def _records(items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        return []
    out: List[Dict[str, Any]] = []
    seen = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        record_id = ident(item.get("id"))
        if record_id is None or record_id in seen:
            continue
        seen.add(record_id)
        record = dict(item)
        record["id"] = record_id
        out.append(record)
    return out


DEFAULT_LOCATIONS = (
    ("repos", "Repos", LocationType.REPOS),
    ("intervention", "Intervention", LocationType.INTERVENTION),
    ("absent", "Absent", LocationType.ABSENT),
)


def default_state() -> BoardState:
    """No doctors; the three built-in locations, each with an empty entry."""
    locations = [
        {"id": loc_id, "name": name, "type": loc_type.value}
        for loc_id, name, loc_type in DEFAULT_LOCATIONS
    ]
    return BoardState(
        doctors=[],
        locations=locations,
        assignments={loc["id"]: [] for loc in locations},
    )
