"""Domain Types — verifies value objects and enum values.

Tests:
    - Role has exactly two members and serializes to string
    - Actor.is_admin follows role
    - Verdict factories
    - Projection never includes the credential column
"""

from users_api.core.domain_types import (
    Actor, Role, UserId, Verdict, DenialReason,
    USER_PROJECTION_FIELDS, UPDATABLE_FIELDS,
)


def test_user_id_wraps_int():
    assert UserId(5) == 5


def test_role_has_two_members():
    assert {r.value for r in Role} == {"user", "admin"}


def test_role_is_str_enum():
    assert Role.ADMIN == "admin"


def test_actor_is_admin():
    assert Actor(id=1, role=Role.ADMIN).is_admin
    assert not Actor(id=1, role=Role.USER).is_admin


def test_verdict_factories():
    assert Verdict.allow().allowed
    assert Verdict.allow().reason is None
    denied = Verdict.deny(DenialReason.UNAUTHENTICATED)
    assert not denied.allowed
    assert denied.reason.value == "Unauthenticated"


def test_projection_excludes_password_hash():
    assert "password_hash" not in USER_PROJECTION_FIELDS
    assert set(USER_PROJECTION_FIELDS) == {
        "id", "name", "email", "role", "created_at", "updated_at",
    }


def test_updatable_fields():
    assert UPDATABLE_FIELDS == {"name", "email", "role"}
