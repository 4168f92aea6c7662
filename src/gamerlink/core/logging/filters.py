# src/gamerlink/core/logging/filters.py
"""
Logging filters.

- `RequestIdFilter` guarantees every LogRecord carries a `request_id` attribute,
  read from a contextvar that `RequestIDMiddleware` sets per HTTP request. The
  contextvar follows the request across `await`s, so repository and service logs
  emitted while serving a request are tagged with the same id.
- `RedactFilter` masks record attributes whose names look like credentials
  (passwords, tokens, ...), whatever `extra=` they arrived through.

Neither filter ever drops a record: both always return True.
"""

import logging
from logging import LogRecord
import contextvars

# Default None means "no request in flight" (CLI, startup, background work)
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id(token) to restore the previous value
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Populate `record.request_id` from, in order:
      * an explicit `extra={"request_id": ...}` on the logging call
      * the contextvar set by the middleware
      * the sentinel "-" so `%(request_id)s` never raises KeyError
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "hashed_password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    }
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
