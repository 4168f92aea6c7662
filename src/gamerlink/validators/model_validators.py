"""Model-introspection checks run by `BaseRepository.create` before touching the DB."""
from typing import Iterable

from sqlalchemy import Integer, UniqueConstraint, and_, select
from sqlalchemy import inspect as sa_inspect


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """Return the kwarg keys that are not mapped attributes of `model`."""
    allowed = {attr.key for attr in sa_inspect(model).attrs}
    return [k for k in kwargs if k not in allowed]


def _is_auto_pk(col) -> bool:
    return col.primary_key and col.autoincrement in (True, "auto") and isinstance(col.type, Integer)


def get_required_columns(model) -> list[str]:
    """Columns that are NOT NULL, have no client/server default and are not auto-increment PKs."""
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        if not col.nullable and not has_default and not _is_auto_pk(col):
            cols.append(col.name)
    return cols


def get_unique_column_sets(model) -> list[Iterable[str]]:
    """Unique column sets from `unique=True`, `UniqueConstraint` and unique indexes."""
    unique_sets = []

    for col in model.__table__.columns:
        if col.unique:
            unique_sets.append([col.name])

    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint):
            unique_sets.append([c.name for c in constraint.columns])

    for idx in model.__table__.indexes:
        if idx.unique:
            unique_sets.append([c.name for c in idx.columns])

    return unique_sets


async def find_unique_conflicts(db, model, kwargs: dict) -> set[str]:
    """
    Pre-insert lookup for rows that would violate a unique constraint.

    Best-effort only: a concurrent insert can still win the race, which the
    IntegrityError mapping in `db_error_handler` covers.
    """
    conflicts = set()

    for cols in get_unique_column_sets(model):
        if not all(c in kwargs and kwargs[c] is not None for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        res = await db.execute(select(model).where(and_(*conditions)).limit(1))
        if res.scalars().first() is not None:
            conflicts.update(cols)

    return conflicts
