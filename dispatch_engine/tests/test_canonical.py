"""
Tests for canonical serialization.
"""

import json

from dispatch_engine.core.canonical import canonicalize, canonical_json_bytes, canonical_json_str


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"doctors": [], "locations": [], "assignments": {"b": [], "a": []}}
    d2 = {"assignments": {"a": [], "b": []}, "locations": [], "doctors": []}

    assert canonical_json_str(d1) == canonical_json_str(d2)


def test_canonicalize_keeps_list_order():
    """Assignment order is display order and must survive."""
    obj = {"assignments": {"repos": ["d2", "d1"]}}

    assert canonicalize(obj)["assignments"]["repos"] == ["d2", "d1"]


def test_canonicalize_tuple_becomes_list():
    assert canonicalize({"x": (1, 2)}) == {"x": [1, 2]}


def test_canonical_json_bytes_determinism():
    obj = {"b": 2, "a": 1, "c": {"x": 10, "y": 20}}

    b1 = canonical_json_bytes(obj)
    b2 = canonical_json_bytes(obj)

    assert b1 == b2
    assert isinstance(b1, bytes)
    assert canonical_json_str({"b": 2, "a": 1}) == '{"a":1,"b":2}'


def test_canonical_handles_unicode():
    obj = {"name": "Dr Hélène Müller"}

    assert canonical_json_str(obj) == '{"name":"Dr H\\u00e9l\\u00e8ne M\\u00fcller"}'
    assert json.loads(canonical_json_str(obj)) == obj


def test_canonical_encodes_lone_surrogates():
    """A lone surrogate is legal in JSON text and must still hash."""
    obj = {"name": "Dr \ud800"}

    data = canonical_json_bytes(obj)

    assert data == b'{"name":"Dr \\ud800"}'
    assert json.loads(data) == obj
