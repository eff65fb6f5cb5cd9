"""Repositories — SQLAlchemy implementations of core/repository_protocols.py.

Invariants:
    - One AsyncSession per repository instance, shared within a request
    - Repositories flush at most; commit/rollback belongs to the services
    - Reference resolution happens here, in batched IN queries (no N+1)
"""
