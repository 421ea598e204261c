"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the only entity (flat record, no relationships)

Design Decisions:
    - Models imported here so Base.metadata is populated by a single import
"""

from users_api.models.user import User  # noqa: F401
