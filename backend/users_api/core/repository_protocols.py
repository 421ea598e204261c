"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Every read/write returns the credential-free UserRecord projection
    - Missing rows surface as UserNotFoundError, never as None or a partial record

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, route handlers await them
"""

from typing import Protocol

from users_api.core.domain_types import UserId, UserRecord


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def list_users(self) -> list[UserRecord]: ...
    async def get_user_by_id(self, user_id: UserId) -> UserRecord: ...
    async def update_user(
        self, user_id: UserId, changes: dict,
    ) -> UserRecord: ...
    async def delete_user(self, user_id: UserId) -> UserRecord: ...
