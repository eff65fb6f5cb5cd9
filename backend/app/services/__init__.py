"""Services Layer — one lifecycle class per aggregate, one instance per request.

Invariants:
    - Services own the unit of work: they commit, repositories never do
    - Authorization and validation run before any write

Design Decisions:
    - Pure decisions delegated to core/, storage to repositories/ (ADR: functional core)
"""
