"""
Declarative base for every ORM model in the package.

Models import `Base` from here; `Base.metadata` is what the test-suite and
`create_all` use to build the schema.
"""

from sqlalchemy import DateTime
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import FunctionElement


class Base(DeclarativeBase):
    pass


# Naming convention for constraints and indexes
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}


class statement_clock(FunctionElement):
    """
    Wall-clock time when the statement runs.

    Postgres `now()` is the transaction start time; `clock_timestamp()` is not.
    """
    type = DateTime(timezone=True)
    inherit_cache = True


@compiles(statement_clock)
def _compile_statement_clock(element, compiler, **kw):
    return "CURRENT_TIMESTAMP"


@compiles(statement_clock, "postgresql")
def _compile_statement_clock_postgresql(element, compiler, **kw):
    return "clock_timestamp()"
