"""
Dispatch sync server.

Owns the canonical board state and keeps every connected client in sync
over Socket.IO.
"""
