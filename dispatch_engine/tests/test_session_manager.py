"""
Tests for the session manager: connect sync, fan-out, ordering, failures.

The Socket.IO transport is replaced by a recording emit function; async
code is driven with asyncio.run.
"""

import asyncio
import logging
import os
import tempfile

import pytest

from dispatch_engine.core.reducer import Reducer
from dispatch_engine.core.state import default_state
from dispatch_engine.snapshot import SnapshotStore
from dispatch_server.canonical_store import CanonicalStore
from dispatch_server.session_manager import SYNC_EVENT, SessionManager


class RecordingEmit:
    def __init__(self):
        self.sent = []

    async def __call__(self, event, data=None, to=None):
        self.sent.append((event, data, to))

    def to(self, sid):
        return [data for event, data, target in self.sent if target == sid and event == SYNC_EVENT]


class CountingSnapshotStore(SnapshotStore):
    def __init__(self, path, fail=False):
        super().__init__(path)
        self.saves = 0
        self.fail = fail

    def save(self, state):
        self.saves += 1
        if self.fail:
            return False
        return super().save(state)


def _manager(tmpdir, fail=False):
    snapshots = CountingSnapshotStore(os.path.join(tmpdir, "data.json"), fail=fail)
    emit = RecordingEmit()
    manager = SessionManager(CanonicalStore(snapshots.load()), snapshots, emit)
    return manager, emit, snapshots


def test_connect_syncs_only_new_session():
    async def scenario(tmpdir):
        manager, emit, snapshots = _manager(tmpdir)
        await manager.connect("s1")
        await manager.connect("s2")
        return manager, emit, snapshots

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit, snapshots = asyncio.run(scenario(tmpdir))

        assert emit.to("s1") == [default_state().to_dict()]
        assert emit.to("s2") == [default_state().to_dict()]
        assert len(emit.sent) == 2
        assert snapshots.saves == 0
        assert manager.session_ids == ["s1", "s2"]


def test_broadcast_fan_out_three_sessions():
    """One action: all 3 sessions, sender included, get the same sync; one write."""

    async def scenario(tmpdir):
        manager, emit, snapshots = _manager(tmpdir)
        for sid in ("s1", "s2", "s3"):
            await manager.connect(sid)
        emit.sent.clear()
        await manager.handle_action("s2", {"type": "ADD_DOCTOR", "payload": {"name": "Dr A", "specialty": "X"}})
        return manager, emit, snapshots

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit, snapshots = asyncio.run(scenario(tmpdir))

        payloads = [emit.to(sid) for sid in ("s1", "s2", "s3")]
        assert all(len(p) == 1 for p in payloads)
        assert payloads[0] == payloads[1] == payloads[2]
        assert payloads[0][0]["doctors"][0]["name"] == "Dr A"
        assert snapshots.saves == 1

        # Broadcast state was durably written before it was sent
        assert SnapshotStore(snapshots.path).load().to_dict() == payloads[0][0]
        assert manager.store.version == 1


def test_disconnected_session_gets_no_broadcast():
    async def scenario(tmpdir):
        manager, emit, _ = _manager(tmpdir)
        await manager.connect("s1")
        await manager.connect("s2")
        manager.disconnect("s1")
        emit.sent.clear()
        await manager.handle_action("s2", {"type": "DELETE_LOCATION", "payload": "absent"})
        return manager, emit

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit = asyncio.run(scenario(tmpdir))

        assert emit.to("s1") == []
        assert len(emit.to("s2")) == 1
        assert not manager.is_connected("s1")
        # Disconnect leaves shared state alone
        assert "absent" not in manager.store.current().location_ids()


def test_disconnect_unknown_session_is_harmless():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager, _, _ = _manager(tmpdir)

        manager.disconnect("never-connected")

        assert manager.session_ids == []


def test_malformed_and_unknown_actions_still_broadcast():
    async def scenario(tmpdir):
        manager, emit, snapshots = _manager(tmpdir)
        await manager.connect("s1")
        emit.sent.clear()
        await manager.handle_action("s1", "not an object")
        await manager.handle_action("s1", {"type": "FUTURE_ACTION", "payload": {}})
        await manager.handle_action("s1", {"payload": {"name": "no type"}})
        return manager, emit, snapshots

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit, snapshots = asyncio.run(scenario(tmpdir))

        assert emit.to("s1") == [default_state().to_dict()] * 3
        assert snapshots.saves == 3
        assert manager.store.current() == default_state()


def test_actions_applied_in_receipt_order():
    """Concurrent senders: each cycle completes before the next starts."""

    async def scenario(tmpdir):
        manager, emit, _ = _manager(tmpdir)
        await manager.connect("s1")
        await manager.connect("s2")
        await manager.handle_action("s1", {"type": "ADD_DOCTOR", "payload": {"name": "Dr A", "specialty": "X"}})
        doctor_id = manager.store.current().doctor_ids()[0]
        emit.sent.clear()

        await asyncio.gather(
            manager.handle_action("s1", {"type": "MOVE_DOCTOR", "payload": {"doctorId": doctor_id, "destination": "repos"}}),
            manager.handle_action("s2", {"type": "MOVE_DOCTOR", "payload": {"doctorId": doctor_id, "destination": "absent"}}),
        )
        return manager, emit, doctor_id

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit, doctor_id = asyncio.run(scenario(tmpdir))

        # Last received wins, no merge
        assert manager.store.current().location_of(doctor_id) == "absent"

        seen_by_s1 = emit.to("s1")
        assert [s["assignments"]["repos"] for s in seen_by_s1] == [[doctor_id], []]
        assert emit.to("s1") == emit.to("s2")
        assert manager.store.version == 3


def test_persistence_failure_is_not_fatal():
    async def scenario(tmpdir):
        manager, emit, snapshots = _manager(tmpdir, fail=True)
        await manager.connect("s1")
        await manager.handle_action("s1", {"type": "ADD_LOCATION", "payload": {"name": "Bloc", "type": "other"}})
        await manager.handle_action("s1", {"type": "ADD_LOCATION", "payload": {"name": "Bloc 2", "type": "other"}})
        return manager, emit, snapshots

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, emit, snapshots = asyncio.run(scenario(tmpdir))

        assert snapshots.saves == 2
        assert len(manager.store.current().locations) == 5
        assert len(emit.to("s1")) == 3


def test_reducer_exception_does_not_commit():
    class ExplodingReducer(Reducer):
        def apply(self, state, action):
            raise RuntimeError("boom")

    async def scenario(manager):
        await manager.connect("s1")
        await manager.handle_action("s1", {"type": "ADD_DOCTOR", "payload": {"name": "A", "specialty": "B"}})

    with tempfile.TemporaryDirectory() as tmpdir:
        snapshots = CountingSnapshotStore(os.path.join(tmpdir, "data.json"))
        emit = RecordingEmit()
        manager = SessionManager(CanonicalStore(default_state()), snapshots, emit, reducer=ExplodingReducer())

        with pytest.raises(RuntimeError):
            asyncio.run(scenario(manager))

        assert manager.store.version == 0
        assert snapshots.saves == 0
        assert len(emit.sent) == 1


def test_restart_resumes_from_snapshot():
    async def first_run(tmpdir):
        manager, _, _ = _manager(tmpdir)
        await manager.connect("s1")
        await manager.handle_action("s1", {"type": "ADD_DOCTOR", "payload": {"name": "Dr A", "specialty": "X"}})
        return manager.store.current()

    async def second_run(tmpdir):
        manager, emit, _ = _manager(tmpdir)
        await manager.connect("s9")
        return emit

    with tempfile.TemporaryDirectory() as tmpdir:
        before = asyncio.run(first_run(tmpdir))
        emit = asyncio.run(second_run(tmpdir))

        assert emit.to("s9") == [before.to_dict()]


def test_lone_surrogate_action_keeps_snapshot_writable():
    async def scenario(tmpdir):
        manager, emit, snapshots = _manager(tmpdir)
        await manager.connect("s1")
        await manager.handle_action("s1", {"type": "ADD_DOCTOR", "payload": {"name": "Dr \ud800", "specialty": "X"}})
        await manager.handle_action("s1", {"type": "ADD_DOCTOR", "payload": {"name": "Dr B", "specialty": "Y"}})
        return manager, snapshots

    with tempfile.TemporaryDirectory() as tmpdir:
        manager, snapshots = asyncio.run(scenario(tmpdir))

        assert snapshots.saves == 2
        assert SnapshotStore(snapshots.path).load() == manager.store.current()


def test_disconnect_logs_session_duration(caplog):
    async def scenario(tmpdir):
        manager, _, _ = _manager(tmpdir)
        await manager.connect("s1")
        return manager

    with tempfile.TemporaryDirectory() as tmpdir:
        manager = asyncio.run(scenario(tmpdir))
        with caplog.at_level(logging.INFO, logger="dispatch_server.session_manager"):
            manager.disconnect("s1")

        assert any("User disconnected after" in r.getMessage() for r in caplog.records)
