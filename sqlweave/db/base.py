"""Dialect-agnostic async connection contract.

A :class:`Connection` owns one driver pool, a table-name prefix and the
resolver for its dialect.  Every public query method resolves a
:class:`~sqlweave.schema.statement.Statement` and hands the resulting
``(sql, params)`` pair to the subclass's driver primitive::

    db = await sqlweave.connect(ConnectionConfig.from_url(url))
    rows = await db.query(sql(['SELECT * FROM "', '" WHERE id = ', ""], "users", 7))
    row = await db.query_one_sql(['SELECT * FROM "', '" WHERE id = ', ""], "users", 7)
    await db.close()

Driver failures surface as :class:`~sqlweave.errors.DriverError` (or
:class:`~sqlweave.errors.DuplicateKeyError`) carrying the resolved SQL,
parameters and backend error code.  Nothing is retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from sqlweave.compile.base import ResolvedSQL, SQLResolver
from sqlweave.compile.registry import ResolverFactory
from sqlweave.db.table import Table
from sqlweave.errors import ConfigurationError, DriverError, DuplicateKeyError
from sqlweave.schema.config import ConnectionConfig, Dialect
from sqlweave.schema.statement import Statement

logger = logging.getLogger(__name__)

#: A result row keyed by column name.
Row = dict[str, Any]

TResult = TypeVar("TResult")

#: Every connection that has been created and not yet closed.
connected_databases: list[Connection] = []


@dataclass(frozen=True)
class ExecResult:
    """Summary of a write statement.

    Attributes:
        affected_rows: Rows inserted, updated or deleted, when reported.
        last_insert_id: Auto-increment id of the last insert (MySQL only).
        status: Command tag reported by the server (PostgreSQL only),
            e.g. ``"UPDATE 3"``.
    """

    affected_rows: int | None = None
    last_insert_id: int | None = None
    status: str | None = None


class Connection(ABC):
    """Base class for a pooled database connection of one dialect.

    Args:
        pool: The driver pool to execute statements on.
        prefix: Prepended to every table name obtained via :meth:`get_table`.
    """

    #: The backend this class talks to; set by each subclass.
    dialect: ClassVar[Dialect]

    #: Driver exception types translated into :class:`DriverError`.
    driver_errors: ClassVar[tuple[type[BaseException], ...]] = ()

    def __init__(self, pool: Any, prefix: str = "") -> None:
        self.pool = pool
        self.prefix = prefix
        self.resolver: SQLResolver = ResolverFactory.create(self.dialect)
        connected_databases.append(self)

    @classmethod
    async def from_config(cls, config: ConnectionConfig) -> Connection:
        """Create the driver pool described by ``config`` and wrap it."""
        pool = await cls.create_pool(config)
        logger.info(
            "Opened %s pool: host=%s, port=%s, database=%s, prefix=%r",
            config.dialect.value,
            config.host,
            config.resolved_port,
            config.database,
            config.prefix,
        )
        return cls(pool, prefix=config.prefix)

    # ------------------------------------------------------------------
    # Driver primitives (implemented per backend)
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    async def create_pool(cls, config: ConnectionConfig) -> Any:
        """Create the driver pool for ``config``."""

    @abstractmethod
    async def _query(self, sql: str, params: list[Any]) -> list[Row]:
        """Execute a read statement and return its rows."""

    @abstractmethod
    async def _query_exec(self, sql: str, params: list[Any]) -> ExecResult:
        """Execute a write statement and return its summary."""

    @abstractmethod
    async def _close_pool(self, pool: Any) -> None:
        """Release ``pool``."""

    @abstractmethod
    def _error_code(self, exc: BaseException) -> str | int | None:
        """Return the backend error code carried by a driver exception."""

    @abstractmethod
    def _is_duplicate_key(self, code: str | int | None) -> bool:
        """Return whether ``code`` marks a unique-constraint violation."""

    def _error_message(self, exc: BaseException) -> str:
        return str(exc) or type(exc).__name__

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def escape_id(self, name: str) -> str:
        """Quote and escape an identifier for this connection's dialect."""
        return self.resolver.quote_identifier(name)

    def resolve(self, statement: Statement) -> ResolvedSQL:
        """Flatten ``statement`` into this dialect's SQL text and parameters."""
        return self.resolver.resolve(statement)

    # ------------------------------------------------------------------
    # Public query API: prebuilt statements
    # ------------------------------------------------------------------

    async def query(self, statement: Statement) -> list[Row]:
        """Execute ``statement`` and return every row."""
        return await self._run(self._query, self.resolve(statement))

    async def query_one(self, statement: Statement) -> Row | None:
        """Execute ``statement`` and return the first row, or ``None``."""
        rows = await self.query(statement)
        return rows[0] if rows else None

    async def query_exec(self, statement: Statement) -> ExecResult:
        """Execute a write ``statement`` and return its :class:`ExecResult`."""
        return await self._run(self._query_exec, self.resolve(statement))

    # ------------------------------------------------------------------
    # Public query API: composition input
    # ------------------------------------------------------------------

    async def query_sql(self, strings: Sequence[str] | str, *values: Any) -> list[Row]:
        """Like :meth:`query`, building the Statement from ``strings``/``values``."""
        return await self.query(Statement(strings, values))

    async def query_one_sql(self, strings: Sequence[str] | str, *values: Any) -> Row | None:
        """Like :meth:`query_one`, building the Statement from ``strings``/``values``."""
        return await self.query_one(Statement(strings, values))

    async def query_exec_sql(self, strings: Sequence[str] | str, *values: Any) -> ExecResult:
        """Like :meth:`query_exec`, building the Statement from ``strings``/``values``."""
        return await self.query_exec(Statement(strings, values))

    async def _run(
        self,
        operation: Callable[[str, list[Any]], Awaitable[TResult]],
        resolved: ResolvedSQL,
    ) -> TResult:
        if self.pool is None:
            raise ConfigurationError(f"{type(self).__name__} is closed")
        logger.debug(
            "Executing %s statement (%d params): %s",
            resolved.dialect,
            len(resolved.params),
            resolved.sql,
        )
        try:
            return await operation(resolved.sql, resolved.params)
        except self.driver_errors as exc:
            code = self._error_code(exc)
            error_cls = DuplicateKeyError if self._is_duplicate_key(code) else DriverError
            raise error_cls(
                self._error_message(exc),
                sql=resolved.sql,
                params=resolved.params,
                code=code,
            ) from exc

    # ------------------------------------------------------------------
    # Tables and lifecycle
    # ------------------------------------------------------------------

    def get_table(self, name: str, primary_key_name: str | None = None) -> Table:
        """Return a :class:`~sqlweave.db.table.Table` bound to this connection."""
        return Table(self, name, primary_key_name)

    async def close(self) -> None:
        """Release the pool and stop tracking this connection.  Idempotent."""
        pool, self.pool = self.pool, None
        if self in connected_databases:
            connected_databases.remove(self)
        if pool is not None:
            await self._close_pool(pool)
            logger.info("Closed %s pool", self.dialect.value)

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "closed" if self.pool is None else "open"
        return f"<{type(self).__name__} {state} prefix={self.prefix!r}>"


async def close_all() -> None:
    """Close every tracked connection; call once at process shutdown."""
    for db in list(connected_databases):
        await db.close()
