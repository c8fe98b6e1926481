"""
Session manager: client connections and the action cycle.

Per connection:
    connect    -> the new session alone receives the full state ("sync")
    action     -> apply via reducer, commit, write snapshot, broadcast
                  the new state to every session, the sender included
    disconnect -> session leaves the broadcast set; shared state untouched

Actions from all sessions run one at a time, in receipt order, under a
single FIFO lock held for the whole cycle. The snapshot is written before
the broadcast, so a state any client has seen was already persisted
(unless the write failed, which is logged and counted).
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from dispatch_engine.core.actions import Action
from dispatch_engine.core.reducer import Reducer
from dispatch_engine.core.state import BoardState
from dispatch_engine.handlers import build_reducer
from dispatch_engine.snapshot import SnapshotStore

from .canonical_store import CanonicalStore
from .logging_config import get_logger
from .metrics import (
    set_connected_sessions,
    track_action,
    track_action_duration,
    track_snapshot_failure,
)

# emit(event, data, to=sid); python-socketio's AsyncServer.emit fits
Emit = Callable[..., Awaitable[Any]]

SYNC_EVENT = "sync"
ACTION_EVENT = "action"


class SessionManager:
    """
    Owns the broadcast set and the single serialized action path.

    The canonical store and the snapshot are only ever touched from here.
    """

    def __init__(
        self,
        store: CanonicalStore,
        snapshots: SnapshotStore,
        emit: Emit,
        reducer: Optional[Reducer] = None,
    ) -> None:
        self.store = store
        self.snapshots = snapshots
        self.reducer = reducer or build_reducer()
        self._emit = emit
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()
        self._seq = 0

    @property
    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def is_connected(self, sid: str) -> bool:
        return sid in self._sessions

    async def connect(self, sid: str) -> None:
        """Register a session and send it the current state."""
        logger = get_logger(__name__, trace_id=sid)
        async with self._lock:
            self._sessions[sid] = {"connected_at": time.time()}
            set_connected_sessions(len(self._sessions))
            logger.info(f"User connected ({len(self._sessions)} sessions)")
            await self._emit(SYNC_EVENT, self.store.current().to_dict(), to=sid)

    def disconnect(self, sid: str) -> None:
        logger = get_logger(__name__, trace_id=sid)
        session = self._sessions.pop(sid, None)
        if session is None:
            logger.debug("Disconnect for unknown session")
            return
        set_connected_sessions(len(self._sessions))
        duration = time.time() - session["connected_at"]
        logger.info(f"User disconnected after {duration:.1f}s ({len(self._sessions)} sessions)")

    async def handle_action(self, sid: str, message: Any) -> BoardState:
        """
        Run one action cycle: apply, commit, persist, broadcast.

        Malformed and unknown actions resolve to a no-op but still go
        through the full cycle, so the sender always gets a "sync".

        Returns:
            The committed state
        """
        logger = get_logger(__name__, trace_id=sid)
        async with self._lock:
            self._seq += 1
            action = Action.from_message(message, seq=self._seq)
            kind = action.kind

            with track_action_duration():
                current = self.store.current()
                try:
                    next_state = self.reducer.apply(current, action)
                except Exception as e:
                    logger.error(f"Reducer failed on action seq={action.seq} type={action.type!r}: {e}")
                    raise

                version = self.store.commit(next_state)
                track_action(kind.value if kind else "UNKNOWN")
                if kind is None:
                    logger.warning(f"Ignored unknown action type {action.type!r} (seq={action.seq})")
                elif next_state is current:
                    logger.info(f"Action {kind.value} seq={action.seq} was a no-op")
                else:
                    logger.info(f"Applied {kind.value} seq={action.seq}, version={version}")

                if not self.snapshots.save(next_state):
                    track_snapshot_failure()
                    logger.warning(f"Snapshot not written for version={version}, in-memory state kept")

                await self._broadcast(next_state)
            return next_state

    async def _broadcast(self, state: BoardState) -> None:
        payload = state.to_dict()
        for sid in list(self._sessions):
            await self._emit(SYNC_EVENT, payload, to=sid)
