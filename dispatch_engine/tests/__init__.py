"""
Test suite for the dispatch sync engine.

Focus areas:
- Reducer purity and action semantics
- Board invariants under arbitrary action sequences
- Snapshot durability and fallback
- Session fan-out and ordering
"""
