"""Services Layer — async persistence behind core/repository_protocols.py.

Invariants:
    - Services own every SQL statement; routes never build queries
    - Errors leave services as UsersApiError subclasses, never raw SQLAlchemy errors
"""
