"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Store failures leave this layer as DatabaseError, never as raw driver errors

Design Decisions:
    - One session manager per process, owned by the FastAPI lifespan
"""
