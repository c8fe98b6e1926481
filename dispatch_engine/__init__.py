"""
Dispatch Sync Engine

Deterministic reducer, board state model and durable snapshot for the shared
doctor dispatch board.
"""

__version__ = "0.1.0"
