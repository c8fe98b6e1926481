"""
Read-only query helpers for board state.
"""

from typing import Any, Dict, List

from .core.state import BoardState, ident


def unassigned_doctors(state: BoardState) -> List[Dict[str, Any]]:
    placed = {d for ids in state.assignments.values() for d in ids}
    return [d for d in state.doctors if d["id"] not in placed]


def board_rows(state: BoardState) -> List[Dict[str, Any]]:
    """
    One row per location, in declaration order, with its doctors resolved.
    """
    by_id = {d["id"]: d for d in state.doctors}
    rows = []
    for location in state.locations:
        doctor_ids = state.assignments.get(location["id"], [])
        rows.append(
            {
                "location": location,
                "doctors": [by_id[d] for d in doctor_ids if d in by_id],
            }
        )
    return rows


def find_violations(data: Any) -> List[str]:
    """
    Report invariant violations in a raw (JSON-shaped) board document.

    Unlike BoardState.from_dict, nothing is repaired; each problem found is
    described in one line. An empty list means the document is valid.
    """
    if not isinstance(data, dict):
        return ["document is not a JSON object"]

    problems: List[str] = []
    for key in ("doctors", "locations", "assignments"):
        if key not in data:
            problems.append(f"missing field: {key}")

    doctors = data.get("doctors") if isinstance(data.get("doctors"), list) else []
    locations = data.get("locations") if isinstance(data.get("locations"), list) else []
    assignments = data.get("assignments") if isinstance(data.get("assignments"), dict) else {}

    doctor_ids = set()
    for d in doctors:
        d_id = ident(d.get("id")) if isinstance(d, dict) else None
        if d_id is None:
            problems.append(f"doctor without valid id: {d!r}")
        elif d_id in doctor_ids:
            problems.append(f"duplicate doctor id: {d_id}")
        else:
            doctor_ids.add(d_id)

    location_ids = set()
    for loc in locations:
        loc_id = ident(loc.get("id")) if isinstance(loc, dict) else None
        if loc_id is None:
            problems.append(f"location without valid id: {loc!r}")
        elif loc_id in location_ids:
            problems.append(f"duplicate location id: {loc_id}")
        else:
            location_ids.add(loc_id)

    keys = {ident(k) for k in assignments}
    for loc_id in sorted(location_ids - keys):
        problems.append(f"location {loc_id} has no assignment entry")
    for key in sorted(k for k in keys - location_ids if k is not None):
        problems.append(f"assignment entry for unknown location {key}")

    seen: Dict[str, str] = {}
    for raw_key, entry in assignments.items():
        key = ident(raw_key)
        if not isinstance(entry, list):
            problems.append(f"assignment entry {key} is not a list")
            continue
        for raw_id in entry:
            d_id = ident(raw_id)
            if d_id not in doctor_ids:
                problems.append(f"unknown doctor {raw_id!r} assigned to {key}")
            elif d_id in seen:
                problems.append(f"doctor {d_id} assigned to both {seen[d_id]} and {key}")
            else:
                seen[d_id] = key
    return problems
