"""Connection management for the SQLite and PostgreSQL backends."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import Executable
from sqlalchemy.sql.elements import TextClause

from expense_tracker.core.config import Settings
from expense_tracker.core.dialects import BackendKind, SqlDialect, dialect_for
from expense_tracker.core.errors import ConflictError, DatabaseConnectionError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()

Statement = Union[Executable, str]
StatementSpec = Union[Statement, tuple[Statement, Mapping[str, Any] | None]]
Row = dict[str, Any]

_READ_PREFIXES = ("SELECT", "WITH", "PRAGMA", "EXPLAIN")
_UNIQUE_SQLSTATE = "23505"


@dataclass(slots=True)
class WriteResult:
    """Outcome of an INSERT/UPDATE/DELETE."""

    inserted_id: int | None = None
    affected_rows: int = 0
    rows: list[Row] = field(default_factory=list)


def _is_read(statement: Executable) -> bool:
    if isinstance(statement, TextClause):
        return statement.text.lstrip().upper().startswith(_READ_PREFIXES)
    return bool(getattr(statement, "is_select", False))


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == _UNIQUE_SQLSTATE:
        return True
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _unpack(spec: StatementSpec) -> tuple[Executable, Mapping[str, Any] | None]:
    if isinstance(spec, tuple):
        statement, params = spec
    else:
        statement, params = spec, None
    if isinstance(statement, str):
        statement = text(statement)
    return statement, params


class Database:
    """Holds the single engine (and its pool) for one backend.

    Construct one per application and pass it down; routes receive it
    through ``get_database``.
    """

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        connect_timeout: float = 2.0,
        ssl: bool = False,
    ) -> None:
        self._url = make_url(database_url)
        self._echo = echo
        self._pool_size = pool_size
        self._connect_timeout = connect_timeout
        self._ssl = ssl
        self._backend_kind = BackendKind(self._url.get_backend_name())
        self._dialect = dialect_for(self._backend_kind)
        self._engine: AsyncEngine | None = None

    @classmethod
    def from_settings(cls, current: Settings) -> "Database":
        return cls(
            current.database_url,
            echo=current.DEBUG,
            pool_size=current.POSTGRES_POOL_SIZE,
            connect_timeout=current.POSTGRES_CONNECT_TIMEOUT,
            ssl=current.POSTGRES_SSL,
        )

    @property
    def backend_kind(self) -> BackendKind:
        return self._backend_kind

    @property
    def dialect(self) -> SqlDialect:
        return self._dialect

    @property
    def is_active(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        if self._backend_kind is BackendKind.POSTGRESQL:
            connect_args: dict[str, Any] = {"timeout": self._connect_timeout}
            if self._ssl:
                connect_args["ssl"] = "require"
            return create_async_engine(
                self._url,
                echo=self._echo,
                future=True,
                pool_size=self._pool_size,
                max_overflow=0,
                pool_pre_ping=True,
                connect_args=connect_args,
            )

        engine = create_async_engine(self._url, echo=self._echo, future=True)

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[arg-type]
            # Hand transaction control to SQLAlchemy so BEGIN is always emitted.
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()
            # Built-in LOWER() only folds ASCII; category names are matched through it.
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_sqlite(conn):  # type: ignore[arg-type]
            conn.exec_driver_sql("BEGIN")

        return engine

    async def connect(self) -> None:
        """Create the engine and make sure the backend answers."""
        if self._engine is not None:
            return

        engine = self._create_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            await engine.dispose()
            logger.error("Could not connect to %s database: %s", self._backend_kind.value, exc)
            raise DatabaseConnectionError(
                f"could not connect to the {self._backend_kind.value} database"
            ) from exc

        self._engine = engine
        logger.info("Connected to %s database", self._backend_kind.value.upper())

    async def init_schema(self) -> None:
        """Create tables and indexes that do not exist yet."""
        # Importing the models registers their tables on Base.metadata.
        from expense_tracker.domain.categories import models as _categories  # noqa: F401
        from expense_tracker.domain.transactions import models as _transactions  # noqa: F401

        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose of the engine; safe to call more than once."""
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Database connection closed")

    async def ping(self) -> bool:
        """Return True when a trivial query round-trips."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.exception("Database ping failed")
            return False
        return True

    async def query(
        self,
        statement: Statement,
        params: Mapping[str, Any] | None = None,
    ) -> list[Row] | WriteResult:
        """Execute one statement in its own transaction."""
        engine = self._require_engine()
        executable, _ = _unpack(statement)
        async with engine.begin() as conn:
            return await self._execute(conn, executable, params)

    async def transaction(self, statements: Sequence[StatementSpec]) -> list[list[Row] | WriteResult]:
        """Execute all statements atomically, rolling back on the first failure."""
        engine = self._require_engine()
        results: list[list[Row] | WriteResult] = []
        async with engine.begin() as conn:
            for spec in statements:
                executable, params = _unpack(spec)
                results.append(await self._execute(conn, executable, params))
        return results

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    async def _execute(
        self,
        conn: AsyncConnection,
        statement: Executable,
        params: Mapping[str, Any] | None,
    ) -> list[Row] | WriteResult:
        try:
            result = await conn.execute(statement, dict(params or {}))
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                logger.warning("Unique constraint violation: %s", exc.orig)
                raise ConflictError(
                    "resource already exists or violates a unique constraint"
                ) from exc
            raise

        if _is_read(statement):
            return [dict(row) for row in result.mappings()]

        rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        inserted_id = None
        if getattr(statement, "is_insert", False):
            if rows:
                inserted_id = rows[0].get("id")
            else:
                primary_key = result.inserted_primary_key
                inserted_id = primary_key[0] if primary_key else None
        elif isinstance(statement, TextClause):
            inserted_id = getattr(result, "lastrowid", None)

        affected = len(rows) if rows else result.rowcount
        return WriteResult(inserted_id=inserted_id, affected_rows=affected, rows=rows)


__all__ = ["Base", "Database", "Row", "WriteResult"]
