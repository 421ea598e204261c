"""Error Hierarchy — each error renders the documented status and body.

Tests cover:
    - Status codes per error kind
    - Response bodies match the REST contract
    - DatabaseError never leaks its cause
"""

from users_api.core.errors import (
    AuthorizationDeniedError, DatabaseError, ErrorCategory, FieldError,
    UnauthenticatedError, UserConflictError, UserNotFoundError,
    UsersApiError, ValidationFailedError,
)


def test_validation_failed_error_shape():
    err = ValidationFailedError([FieldError("id", "bad"), FieldError("name", "short")])
    assert err.http_status == 400
    assert err.to_response() == {
        "error": "Validation failed",
        "details": [
            {"field": "id", "message": "bad"},
            {"field": "name", "message": "short"},
        ],
    }


def test_unauthenticated_error_shape():
    err = UnauthenticatedError()
    assert err.http_status == 401
    assert err.to_response() == {"error": "Unauthorized"}


def test_authorization_denied_error_shape():
    err = AuthorizationDeniedError("Forbidden: not self or admin")
    assert err.http_status == 403
    assert err.to_response() == {
        "error": "Forbidden", "message": "Forbidden: not self or admin",
    }


def test_user_not_found_error_shape():
    err = UserNotFoundError(42)
    assert err.http_status == 404
    assert err.user_id == 42
    assert err.context.user_id == 42
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert err.to_response() == {"error": "User not found"}


def test_conflict_error_shape():
    err = UserConflictError()
    assert err.http_status == 409
    assert err.to_response() == {"error": "Conflict", "message": "Email already in use"}


def test_database_error_hides_cause():
    err = DatabaseError("connection refused to 10.0.0.3", "query")
    assert err.http_status == 503
    assert "10.0.0.3" in err.message
    assert err.to_response() == {"error": "Service unavailable"}


def test_all_errors_share_base():
    for err in (
        UnauthenticatedError(), UserNotFoundError(1), UserConflictError(),
        DatabaseError("x", "query"), AuthorizationDeniedError("r"),
        ValidationFailedError([]),
    ):
        assert isinstance(err, UsersApiError)
