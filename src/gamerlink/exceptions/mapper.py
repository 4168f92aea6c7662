"""
Translate low-level SQLAlchemy failures into the public errors from `base.py`.

Two entry points:
  - `raise_mapped_integrity_error(exc, model_name)` for a caught `IntegrityError`
  - `db_error_handler(session, model_name)`, an async context manager that wraps a
    block of repository DB work, rolls back on failure and re-raises a mapped error
"""
import re
import logging
from contextlib import asynccontextmanager
from enum import Enum

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import (
    DuplicateError,
    NotFoundError,
    RepositoryError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# -----------------------
# Constraint classification
# -----------------------

class ConstraintKind(str, Enum):
    UNIQUE = "unique"
    NOT_NULL = "not_null"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
_SQLSTATE_KINDS = {
    "23505": ConstraintKind.UNIQUE,
    "23502": ConstraintKind.NOT_NULL,
    "23503": ConstraintKind.FOREIGN_KEY,
    "23514": ConstraintKind.CHECK,
}

# SQLite only reports message text: 'UNIQUE constraint failed: users.email',
# 'FOREIGN KEY constraint failed', 'CHECK constraint failed: no_self_message'
_MESSAGE_KINDS = (
    (ConstraintKind.UNIQUE, ("unique constraint", "duplicate key")),
    (ConstraintKind.NOT_NULL, ("not null constraint", "null value in column")),
    (ConstraintKind.FOREIGN_KEY, ("foreign key constraint",)),
    (ConstraintKind.CHECK, ("check constraint",)),
)


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Returns:
        (kind, constraint name when the driver reports one)
    """
    orig = exc.orig
    # psycopg exposes `pgcode`, asyncpg `sqlstate`
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate:
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None) or getattr(orig, "constraint_name", None)
        return _SQLSTATE_KINDS.get(sqlstate, ConstraintKind.UNKNOWN), constraint_name

    msg = str(orig).lower()
    for kind, keywords in _MESSAGE_KINDS:
        if any(keyword in msg for keyword in keywords):
            return kind, None
    return ConstraintKind.UNKNOWN, None


# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    'null value in column "content" violates not-null constraint'
    'DETAIL:  Key (username)=(bob) already exists.'
    """
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: users.email' / 'NOT NULL constraint failed: messages.content'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """Best-effort extraction of column names from the driver message."""
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    if not msg:
        return None
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map an IntegrityError to an app-level exception and raise it.

    UNIQUE -> DuplicateError, NOT NULL -> RepositoryError, FOREIGN KEY -> NotFoundError
    (a referenced user does not exist), CHECK -> ValidationError.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"
    log_extra = {"model": model_part, "fields": columns, "constraint": constraint_name}

    if kind is ConstraintKind.UNIQUE:
        logger.info("mapper.duplicate_detected", extra=log_extra)
        if columns:
            raise DuplicateError(f"{model_part} already exists for field(s): {', '.join(columns)}",
                                 fields=columns, constraint=constraint_name) from exc
        raise DuplicateError(f"{model_part} already exists", constraint=constraint_name) from exc

    if kind is ConstraintKind.NOT_NULL:
        logger.info("mapper.not_null_violation", extra=log_extra)
        if columns:
            raise RepositoryError(f"Missing required field(s): {', '.join(columns)} for {model_part}",
                                  fields=columns, constraint=constraint_name) from exc
        raise RepositoryError(f"Missing required field for {model_part}", constraint=constraint_name) from exc

    if kind is ConstraintKind.FOREIGN_KEY:
        logger.info("mapper.foreign_key_violation", extra=log_extra)
        raise NotFoundError(f"{model_part} references a record that does not exist", fields=columns) from exc

    if kind is ConstraintKind.CHECK:
        logger.info("mapper.check_constraint_failure", extra=log_extra)
        raise ValidationError(f"{model_part} business rule violated", fields=columns) from exc

    logger.warning("mapper.unknown_integrity_error", extra={"model": model_part, "constraint": constraint_name})
    raise RepositoryError(f"{model_part} database integrity error.") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("mapper.rollback_failed", extra={"model": model_name})


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise ...

    App-level errors raised inside the block propagate unchanged (after rollback).
    Connection-level failures become StoreUnavailableError; they are not retried here
    because a blind retry of an append would duplicate the message.
    """
    try:
        yield
    except RepositoryError:
        await _safe_rollback(db, model_name)
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except (OperationalError, InterfaceError) as exc:
        await _safe_rollback(db, model_name)
        logger.error("mapper.store_unavailable", extra={"model": model_name, "error": type(exc).__name__})
        raise StoreUnavailableError() from exc
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("mapper.unexpected_db_error", extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
