"""
Transport wiring: Socket.IO + aiohttp.

Binds the session manager to real client connections and serves the small
HTTP surface (/api/ping, /api/state).
"""

import logging
from dataclasses import dataclass

import socketio
from aiohttp import web

from dispatch_engine.snapshot import SnapshotStore

from .canonical_store import CanonicalStore
from .config import ServerConfig
from .session_manager import ACTION_EVENT, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class DispatchApp:
    app: web.Application
    sio: socketio.AsyncServer
    manager: SessionManager


def create_app(config: ServerConfig) -> DispatchApp:
    """
    Build the aiohttp application with the Socket.IO server attached.

    The canonical state is loaded from the snapshot (or defaulted) here,
    once, before any client can connect.
    """
    sio = socketio.AsyncServer(
        async_mode="aiohttp",
        cors_allowed_origins=config.cors_origins,
        logger=False,
        engineio_logger=False,
    )
    app = web.Application()
    sio.attach(app)

    snapshots = SnapshotStore(config.data_file)
    store = CanonicalStore(snapshots.load())
    manager = SessionManager(store, snapshots, sio.emit)
    logger.info(f"Loaded board from {config.data_file}: hash={store.state_hash()[:16]}")

    @sio.event
    async def connect(sid, environ, auth=None):
        await manager.connect(sid)

    @sio.event
    async def disconnect(sid, reason=None):
        manager.disconnect(sid)

    @sio.on(ACTION_EVENT)
    async def action(sid, data):
        await manager.handle_action(sid, data)

    async def ping(request: web.Request) -> web.Response:
        return web.json_response({"message": "pong"})

    async def current_state(request: web.Request) -> web.Response:
        return web.json_response(manager.store.current().to_dict())

    app.router.add_get("/api/ping", ping)
    app.router.add_get("/api/state", current_state)

    return DispatchApp(app=app, sio=sio, manager=manager)
