"""Infrastructure Layer — database session management and logging setup.

Invariants:
    - Infrastructure never imports from core/ domain logic (errors excepted)
    - All SQLAlchemy failures leaving a session are mapped to DatabaseError

Design Decisions:
    - Singletons initialized in the FastAPI lifespan, not at import time
"""
