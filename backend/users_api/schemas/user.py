"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserIdentifier.id: integer in (0, MAX_USER_ID], numeric strings coerced
    - UserUpdate: every field optional; name 2-255 chars stripped,
      email stripped + lowercased + ≤255, role in Role
    - UserUpdate ignores unknown fields (extra="ignore")
    - UserResponse never exposes password_hash

Design Decisions:
    - field_validator(mode="before") for side-effect-free transforms (strip, lower) — keeps models pure
    - Explicit null is rejected: "absent" and "null" are different inputs
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from users_api.core.domain_types import MAX_USER_ID, Role

MAX_EMAIL_LENGTH: int = 255


class UserIdentifier(BaseModel):
    """Route parameter carrying a user id."""
    id: int = Field(gt=0, le=MAX_USER_ID)


class UserUpdate(BaseModel):
    """Partial update payload — unknown keys are dropped."""
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    role: Role | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if len(v) > MAX_EMAIL_LENGTH:
                raise ValueError(
                    f"email must be at most {MAX_EMAIL_LENGTH} characters",
                )
        return v

    @field_validator("name", "email", "role")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class UserResponse(BaseModel):
    """User response — public-facing projection."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime
