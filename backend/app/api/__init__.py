"""API Layer — FastAPI routes, request dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, data} envelope or the failure envelope

Design Decisions:
    - Thin routes delegate to services; the principal is resolved in dependencies.py
"""
