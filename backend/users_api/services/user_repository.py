"""User Repository — async persistence for the users table.

Invariants:
    - Only projection columns are ever selected or returned (never password_hash)
    - get/update/delete raise UserNotFoundError when no row matches — never None,
      never a partially populated record
    - update_user checks existence before writing and always bumps updated_at,
      even when no user-supplied field changed
    - delete_user is a single DELETE ... RETURNING (no separate existence check)
    - Unique email violations → UserConflictError; any other SQLAlchemy error,
      other integrity failures included, → DatabaseError
    - No retries: every failure propagates to the caller after rollback

Design Decisions:
    - Core statements with RETURNING over load-mutate-flush: one round trip per
      write and the returned row is exactly what was persisted
    - Row that vanished between existence check and UPDATE → UserNotFoundError
      (ADR: never fabricate a result for a concurrent delete)
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.core.domain_types import (
    Role, UserId, UserRecord, UPDATABLE_FIELDS,
)
from users_api.core.errors import (
    DatabaseError, UserConflictError, UserNotFoundError,
)
from users_api.models.user import User

logger = logging.getLogger(__name__)

_PROJECTION = (
    User.id, User.name, User.email, User.role,
    User.created_at, User.updated_at,
)


def _to_record(row) -> UserRecord:
    return UserRecord(
        id=int(row.id),
        name=row.name,
        email=row.email,
        role=Role(row.role),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


_UNIQUE_VIOLATION = "23505"


def _is_email_conflict(exc: IntegrityError) -> bool:
    """True only for a unique violation on the email column.

    asyncpg reports SQLSTATE 23505 and the index name (ix_users_email);
    SQLite reports "UNIQUE constraint failed: users.email".
    """
    detail = str(exc.orig).lower()
    unique = (
        getattr(exc.orig, "sqlstate", None) == _UNIQUE_VIOLATION
        or "unique" in detail
    )
    return unique and "email" in detail

class SqlAlchemyUserRepository:
    """UserRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self) -> list[UserRecord]:
        """All users, id ascending."""
        result = await self._execute(
            select(*_PROJECTION).order_by(User.id), "query",
        )
        return [_to_record(row) for row in result.all()]

    async def get_user_by_id(self, user_id: UserId) -> UserRecord:
        result = await self._execute(
            select(*_PROJECTION).where(User.id == user_id).limit(1), "query",
        )
        row = result.first()
        if row is None:
            logger.info(
                f"User with id {user_id} not found", extra={"user_id": user_id},
            )
            raise UserNotFoundError(user_id)
        return _to_record(row)

    async def update_user(self, user_id: UserId, changes: dict) -> UserRecord:
        """Apply changes to an existing user and return the updated projection."""
        existing = await self._execute(
            select(User.id).where(User.id == user_id).limit(1), "query",
        )
        if existing.scalar_one_or_none() is None:
            raise UserNotFoundError(user_id)

        values = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        values["updated_at"] = datetime.now(timezone.utc)

        result = await self._execute(
            update(User)
            .where(User.id == user_id)
            .values(**values)
            .returning(*_PROJECTION),
            "update",
        )
        row = result.first()
        if row is None:
            # Deleted between the existence check and the write
            await self.db.rollback()
            raise UserNotFoundError(user_id)
        await self._commit("update")

        logger.info(
            f"User with id {user_id} updated successfully",
            extra={"user_id": user_id},
        )
        return _to_record(row)

    async def delete_user(self, user_id: UserId) -> UserRecord:
        """Permanently remove a user and return its pre-deletion projection."""
        result = await self._execute(
            delete(User).where(User.id == user_id).returning(*_PROJECTION),
            "delete",
        )
        row = result.first()
        if row is None:
            await self.db.rollback()
            raise UserNotFoundError(user_id)
        await self._commit("delete")

        logger.info(
            f"User with id {user_id} deleted successfully",
            extra={"user_id": user_id},
        )
        return _to_record(row)

    # ─── internals ──────────────────────────────────────────────

    async def _execute(self, statement, operation: str):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            await self._fail(e, operation)

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail(e, operation)

    async def _fail(self, exc: SQLAlchemyError, operation: str):
        await self.db.rollback()
        if isinstance(exc, IntegrityError) and _is_email_conflict(exc):
            logger.warning(f"User {operation} rejected by unique email: {exc}")
            raise UserConflictError() from exc
        logger.error(f"Error during user {operation}: {exc}")
        raise DatabaseError("Database operation failed", operation) from exc
