"""
App-level exceptions raised by repositories and services.

Every error carries a user-safe `message`, optional `fields`, and a canonical
`error_code` that drives the HTTP mapping (`http_status()`) and the JSON body
(`to_payload()`). DB-specific details (constraint names) are kept for logs only.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['content'])
    - constraint: optional DB constraint name (for logs only)
    - error_code: canonical short code (e.g., 'not_found', 'invalid_input') used by clients
    """

    ERROR_CODE_TO_STATUS = {
        "duplicate": 409,
        "invalid_field": 422,
        "invalid_input": 422,
        "not_found": 404,
        "forbidden": 403,
        "store_unavailable": 503,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        JSON-serializable body for HTTP responses:
            {"detail": "...", "code": "not_found", "fields": ["message_id"]}
        The constraint name is deliberately left out.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class ValidationError(RepositoryError):
    """Malformed caller input: empty content, self-messaging, empty or malformed ids."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_input")


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class ForbiddenError(RepositoryError):
    """The record exists but the acting user may not touch it."""

    def __init__(self, message: str = "Not allowed", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="forbidden")


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller passes unknown fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


class StoreUnavailableError(RepositoryError):
    """The backing store could not be reached. Never retried by this package."""

    def __init__(self, message: str = "Message store is unavailable"):
        super().__init__(message, error_code="store_unavailable")


__all__ = [
    "RepositoryError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "DuplicateError",
    "InvalidFieldError",
    "StoreUnavailableError",
]
