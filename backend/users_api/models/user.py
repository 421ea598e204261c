"""User ORM — the single persisted entity.

Invariants:
    - id is an autoincrement INTEGER primary key
    - email is stored normalized (lowercase) with a unique index
    - role is constrained to 'user' | 'admin' by a CHECK constraint
    - created_at and updated_at are timezone-aware and set on insert

Design Decisions:
    - password_hash lives on the row but is never selected by the repository
      (projection columns listed in services/user_repository.py)
    - Timestamps set client-side (Python default) so SQLite tests and
      PostgreSQL behave the same
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from users_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User account row."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
