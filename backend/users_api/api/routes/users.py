"""User Routes — list, fetch, update and delete user records.

Invariants:
    - Fixed pipeline per request: validate → resolve actor → authorize → repository → envelope
    - Validation always precedes authentication and authorization (malformed
      input yields 400 even when the bearer token is bad or missing)
    - Authorization always precedes the repository call (denied actors never trigger a write)
    - Every failure is raised as a UsersApiError and rendered by api/error_handlers.py
    - Success bodies: {message, users, count} for list, {message, user} otherwise

Design Decisions:
    - id taken as a raw str path param: coercion belongs to core/validate_user.py,
      so "abc" yields our 400 shape instead of FastAPI's default 422
    - Body read as Any for the same reason
    - Bearer credentials injected raw and decoded in the handler, after validation
    - Repository injected via Depends(get_user_repository) so tests can swap it
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.api.actor import bearer_scheme, resolve_actor
from users_api.config import Settings, get_settings
from users_api.core.authorize_user import evaluate_user_mutation, evaluate_user_read
from users_api.core.domain_types import Actor, UserAction, UserId, UserRecord, Verdict
from users_api.core.errors import (
    AuthorizationDeniedError, ErrorContext, UnauthenticatedError,
)
from users_api.core.repository_protocols import UserRepository
from users_api.core.validate_user import validate_user_identifier, validate_user_update
from users_api.infrastructure.database import get_db
from users_api.schemas.user import UserResponse
from users_api.services.user_repository import SqlAlchemyUserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return SqlAlchemyUserRepository(db)


def _serialize(record: UserRecord) -> dict:
    return UserResponse.model_validate(record).model_dump(mode="json")


def _deny(
    verdict: Verdict, action: UserAction, user_id: UserId, actor: Actor | None,
) -> None:
    reason = verdict.reason.value if verdict.reason else "Forbidden"
    actor_id = actor.id if actor else None
    logger.warning(
        f"Denied {action.value} of user {user_id}",
        extra={"user_id": user_id, "actor_id": actor_id, "reason": reason},
    )
    raise AuthorizationDeniedError(
        reason, ErrorContext(user_id=user_id, actor_id=actor_id),
    )


def _authorize(
    actor: Actor | None, user_id: UserId, changes: dict | None, action: UserAction,
) -> None:
    """Require an actor, then apply the policy. Raises on denial."""
    if actor is None:
        raise UnauthenticatedError(ErrorContext(user_id=user_id))
    verdict = evaluate_user_mutation(actor, user_id, changes, action)
    if not verdict.allowed:
        _deny(verdict, action, user_id, actor)


@router.get("")
async def fetch_all_users(
    repo: UserRepository = Depends(get_user_repository),
):
    """List every user."""
    logger.info("Getting users ...")
    users = await repo.list_users()
    return {
        "message": "Successfully retrieved users",
        "users": [_serialize(u) for u in users],
        "count": len(users),
    }


@router.get("/{user_id}")
async def get_user_by_id(
    user_id: str,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    repo: UserRepository = Depends(get_user_repository),
):
    """Fetch one user."""
    uid = validate_user_identifier(user_id)
    actor = resolve_actor(credentials, settings)
    verdict = evaluate_user_read(actor, uid)
    if not verdict.allowed:
        _deny(verdict, UserAction.READ, uid, actor)

    logger.info(f"Getting user by id: {uid}", extra={"user_id": uid})
    user = await repo.get_user_by_id(uid)
    return {"message": "Successfully retrieved user", "user": _serialize(user)}


@router.patch("/{user_id}")
@router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: Any = Body(None),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    repo: UserRepository = Depends(get_user_repository),
):
    """Apply a partial update to one user."""
    uid = validate_user_identifier(user_id)
    changes = validate_user_update(body)
    actor = resolve_actor(credentials, settings)
    _authorize(actor, uid, changes, UserAction.UPDATE)

    logger.info(
        f"Updating user with id: {uid}",
        extra={"user_id": uid, "actor_id": actor.id},
    )
    user = await repo.update_user(uid, changes)
    return {"message": "User updated successfully", "user": _serialize(user)}


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    repo: UserRepository = Depends(get_user_repository),
):
    """Permanently delete one user."""
    uid = validate_user_identifier(user_id)
    actor = resolve_actor(credentials, settings)
    _authorize(actor, uid, None, UserAction.DELETE)

    logger.info(
        f"Deleting user with id: {uid}",
        extra={"user_id": uid, "actor_id": actor.id},
    )
    user = await repo.delete_user(uid)
    return {"message": "User deleted successfully", "user": _serialize(user)}
