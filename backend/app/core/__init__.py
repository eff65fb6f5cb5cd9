"""Core Layer — pure domain rules for projects, tasks, users and dashboards.

Invariants:
    - No module in core/ imports from services/, api/, repositories/, infrastructure/, or db/
    - Everything except repository_protocols is synchronous and IO-free

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
