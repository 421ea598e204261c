"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int — always > 0 once it has passed validation
    - Role is the only source of valid role strings (no raw string matching)
    - Actor and Verdict are immutable value objects

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)

MAX_USER_ID: int = 2_147_483_647  # INTEGER primary key range


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — maps to DB `role` column."""
    USER = "user"
    ADMIN = "admin"


class UserAction(str, Enum):
    """Actions the authorization policy decides on."""
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class DenialReason(str, Enum):
    """Reason codes attached to a denied Verdict."""
    UNAUTHENTICATED = "Unauthenticated"
    NOT_SELF_OR_ADMIN = "Forbidden: not self or admin"
    ROLE_CHANGE_REQUIRES_ADMIN = "Forbidden: role change requires admin"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Actor:
    """Authenticated caller identity, supplied by the auth collaborator."""
    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Verdict:
    """Allow/deny outcome of the authorization policy."""
    allowed: bool
    reason: DenialReason | None = None

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "Verdict":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class UserRecord:
    """Credential-free projection of a user row."""
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


# Fields returned to callers. password_hash is never part of it.
USER_PROJECTION_FIELDS: tuple[str, ...] = (
    "id", "name", "email", "role", "created_at", "updated_at",
)

# Fields a caller may change through the update path.
UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "email", "role"})
