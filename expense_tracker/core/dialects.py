"""Backend-specific SQL fragments for the two supported databases.

Placeholder rendering is handled by SQLAlchemy's compiler; what remains are
the date functions and how a freshly written row is read back.
"""
from __future__ import annotations

from enum import Enum

from sqlalchemy import Integer, Table, cast, extract, func
from sqlalchemy.sql import ColumnElement
from sqlalchemy.sql.dml import Insert, Update


class BackendKind(str, Enum):
    """Database backends selectable through DATABASE_TYPE."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class SqlDialect:
    """Query-building strategy for one backend."""

    kind: BackendKind
    supports_returning: bool = False

    def month_of(self, column: ColumnElement) -> ColumnElement:
        raise NotImplementedError

    def year_equals(self, column: ColumnElement, year: int) -> ColumnElement:
        raise NotImplementedError

    def returning(self, stmt: Insert | Update, table: Table) -> Insert | Update:
        """Ask the backend to hand back the written row when it can."""
        if self.supports_returning:
            return stmt.returning(*table.c)
        return stmt


class SqliteDialect(SqlDialect):
    kind = BackendKind.SQLITE

    def month_of(self, column: ColumnElement) -> ColumnElement:
        return cast(func.strftime("%m", column), Integer)

    def year_equals(self, column: ColumnElement, year: int) -> ColumnElement:
        return func.strftime("%Y", column) == f"{year:04d}"


class PostgresDialect(SqlDialect):
    kind = BackendKind.POSTGRESQL
    supports_returning = True

    def month_of(self, column: ColumnElement) -> ColumnElement:
        return cast(extract("month", column), Integer)

    def year_equals(self, column: ColumnElement, year: int) -> ColumnElement:
        return cast(extract("year", column), Integer) == year


_DIALECTS: dict[BackendKind, type[SqlDialect]] = {
    BackendKind.SQLITE: SqliteDialect,
    BackendKind.POSTGRESQL: PostgresDialect,
}


def dialect_for(kind: BackendKind | str) -> SqlDialect:
    """Return the strategy instance for a backend kind."""
    return _DIALECTS[BackendKind(kind)]()


__all__ = [
    "BackendKind",
    "PostgresDialect",
    "SqlDialect",
    "SqliteDialect",
    "dialect_for",
]
