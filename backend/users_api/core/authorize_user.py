"""User Authorization Policy — decides whether an actor may touch a user record.

Invariants:
    - Total and pure: every (actor, target, changes, action) maps to exactly one Verdict
    - Reads are never restricted here (authentication is the transport's concern)
    - Update/delete require an actor who is the target or an admin
    - A non-admin can never change a role, not even their own (no self-promotion)

Design Decisions:
    - Returns a Verdict instead of raising: the shell decides how a denial is
      rendered, the policy only decides (ADR: functional core, imperative shell)
"""

from collections.abc import Mapping

from users_api.core.domain_types import Actor, DenialReason, UserAction, Verdict


def is_self(actor: Actor, target_id: int) -> bool:
    return int(actor.id) == int(target_id)


def evaluate_user_read(actor: Actor | None, target_id: int) -> Verdict:
    """Any caller may read any user."""
    return Verdict.allow()


def evaluate_user_mutation(
    actor: Actor | None,
    target_id: int,
    requested_changes: Mapping[str, object] | None,
    action: UserAction,
) -> Verdict:
    """Authorize an update or delete of target_id by actor."""
    if action == UserAction.READ:
        return evaluate_user_read(actor, target_id)

    if actor is None:
        return Verdict.deny(DenialReason.UNAUTHENTICATED)

    if not is_self(actor, target_id) and not actor.is_admin:
        return Verdict.deny(DenialReason.NOT_SELF_OR_ADMIN)

    if (
        action == UserAction.UPDATE
        and requested_changes
        and "role" in requested_changes
        and not actor.is_admin
    ):
        return Verdict.deny(DenialReason.ROLE_CHANGE_REQUIRES_ADMIN)

    return Verdict.allow()
