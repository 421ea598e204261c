"""Actor Resolution — turns a bearer token into the caller's Actor (or None).

Invariants:
    - No Authorization header → None (anonymous; routes decide if that is allowed)
    - Token present but invalid/expired/malformed → UnauthenticatedError (401)
    - Token claims: sub = user id (int-coercible), role ∈ Role
    - Never touches the database: the token is the source of truth for the actor

Design Decisions:
    - The dependency only extracts the raw credentials; routes call
      resolve_actor after id/body validation, so a bad token never masks a 400
    - python-jose for HS256 verification; tokens are issued elsewhere
"""

import logging

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from users_api.config import Settings
from users_api.core.domain_types import Actor, Role
from users_api.core.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_actor(token: str, settings: Settings) -> Actor:
    """Verify token and build an Actor from its claims."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise UnauthenticatedError()

    try:
        return Actor(id=int(payload["sub"]), role=Role(payload.get("role", "user")))
    except (KeyError, TypeError, ValueError):
        logger.warning("Bearer token carries invalid actor claims")
        raise UnauthenticatedError()


def resolve_actor(
    credentials: HTTPAuthorizationCredentials | None, settings: Settings,
) -> Actor | None:
    """None when no token was sent; raises UnauthenticatedError on a bad one."""
    if credentials is None:
        return None
    return decode_actor(credentials.credentials, settings)


def create_access_token(actor: Actor, settings: Settings) -> str:
    """Sign a token for an actor (used by tooling and tests)."""
    return jwt.encode(
        {"sub": str(actor.id), "role": actor.role.value},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
