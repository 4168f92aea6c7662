"""
Boundary checks for ids and message content.

All failures raise `ValidationError` so the caller gets a 422-style error before
any query runs.
"""
from uuid import UUID

from gamerlink.exceptions.base import ValidationError


def require_uuid(value: UUID | str | None, field: str = "user_id") -> UUID:
    """Coerce a UUID-keyed id (users, notifications, play requests). Empty or malformed ids are rejected."""
    if isinstance(value, UUID):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} must not be empty", fields=[field])
    try:
        return UUID(str(value).strip())
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(f"{field} is not a valid id", fields=[field]) from None


def require_message_id(value: int | str | None, field: str = "message_id") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} is not a valid id", fields=[field])
    if isinstance(value, int):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} must not be empty", fields=[field])
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} is not a valid id", fields=[field]) from None


def require_distinct_participants(from_user_id: UUID, to_user_id: UUID) -> None:
    if from_user_id == to_user_id:
        raise ValidationError("Sender and recipient must be different users",
                              fields=["from_user_id", "to_user_id"])


def require_text(value: str | None, field: str) -> str:
    """
    Reject None and whitespace-only text. The value itself is returned untouched;
    message content is stored verbatim.
    """
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must not be empty", fields=[field])
    return value
