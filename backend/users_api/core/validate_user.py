"""User Input Validation — turns untrusted route params and bodies into typed values.

Invariants:
    - Pure: no IO, no logging, same input → same output
    - Failures raise ValidationFailedError with one FieldError per invalid field
    - All field failures are collected in a single pass (never stop at the first)
    - validate_user_update returns only the fields the caller actually sent

Design Decisions:
    - Pydantic does the coercion (schemas/user.py); this module only owns the
      boundary contract (FieldError list) so routes never see pydantic errors
    - Unknown update fields are ignored, not rejected (forward-compatible clients)
"""

from typing import Any

from pydantic import ValidationError

from users_api.core.domain_types import UserId
from users_api.core.errors import FieldError, ValidationFailedError
from users_api.schemas.user import UserIdentifier, UserUpdate


def validate_user_identifier(raw: Any) -> UserId:
    """Coerce a route parameter into a positive integer user id."""
    payload = {} if raw is None else {"id": raw}
    try:
        parsed = UserIdentifier.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailedError(_to_field_errors(e, default_field="id"))
    return UserId(parsed.id)


def validate_user_update(raw: Any) -> dict:
    """Validate a partial update body. Returns normalized {field: value}."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationFailedError(
            [FieldError("body", "Request body must be a JSON object")],
        )
    try:
        parsed = UserUpdate.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailedError(_to_field_errors(e, default_field="body"))
    return parsed.model_dump(exclude_unset=True, mode="json")


def _to_field_errors(exc: ValidationError, default_field: str) -> list[FieldError]:
    """One FieldError per field, first message wins."""
    seen: dict[str, FieldError] = {}
    for e in exc.errors():
        field = str(e["loc"][0]) if e["loc"] else default_field
        if field not in seen:
            seen[field] = FieldError(field, _clean_message(e["msg"]))
    return list(seen.values())


def _clean_message(msg: str) -> str:
    # Pydantic prefixes custom ValueError messages
    return msg.removeprefix("Value error, ")
