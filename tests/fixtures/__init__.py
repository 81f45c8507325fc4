"""Test fixtures: in-memory connections and fake driver pools."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from sqlweave.db.base import Connection, ExecResult, Row
from sqlweave.schema.config import ConnectionConfig, Dialect


class FakeDriverError(Exception):
    """Stands in for a driver exception carrying a backend error code."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class RecordingConnection(Connection):
    """Connection that records every resolved statement instead of sending it.

    ``rows`` are returned by read statements; ``error``, when set, is raised
    by the next statement instead.
    """

    driver_errors = (FakeDriverError,)

    def __init__(self, prefix: str = "", rows: list[Row] | None = None) -> None:
        super().__init__(pool=object(), prefix=prefix)
        self.rows: list[Row] = rows or []
        self.error: BaseException | None = None
        self.executed: list[tuple[str, list[Any]]] = []
        self.closed_pools: list[Any] = []

    @classmethod
    async def create_pool(cls, config: ConnectionConfig) -> Any:
        return object()

    async def _query(self, sql: str, params: list[Any]) -> list[Row]:
        self._record(sql, params)
        return [dict(row) for row in self.rows]

    async def _query_exec(self, sql: str, params: list[Any]) -> ExecResult:
        self._record(sql, params)
        return ExecResult(affected_rows=1)

    async def _close_pool(self, pool: Any) -> None:
        self.closed_pools.append(pool)

    def _error_code(self, exc: BaseException) -> str | None:
        return getattr(exc, "code", None)

    def _is_duplicate_key(self, code: str | int | None) -> bool:
        return code == "DUP"

    def _record(self, sql: str, params: list[Any]) -> None:
        self.executed.append((sql, params))
        if self.error is not None:
            error, self.error = self.error, None
            raise error

    @property
    def last(self) -> tuple[str, list[Any]]:
        """The most recently executed ``(sql, params)`` pair."""
        return self.executed[-1]


class RecordingPostgres(RecordingConnection):
    dialect = Dialect.POSTGRES


class RecordingMySQL(RecordingConnection):
    dialect = Dialect.MYSQL


# ---------------------------------------------------------------------------
# Driver pool fakes
# ---------------------------------------------------------------------------


class FakePgPool:
    """The slice of ``asyncpg.Pool`` used by PostgresConnection."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        status: str = "UPDATE 1",
    ) -> None:
        self.records = records or []
        self.status = status
        self.error: BaseException | None = None
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.close_count = 0

    async def fetch(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(("fetch", sql, args))
        if self.error is not None:
            raise self.error
        return list(self.records)

    async def execute(self, sql: str, *args: Any) -> str:
        self.calls.append(("execute", sql, args))
        if self.error is not None:
            raise self.error
        return self.status

    async def close(self) -> None:
        self.close_count += 1


class _FakeCursor:
    def __init__(self, pool: FakeMySQLPool, cursor_cls: Any) -> None:
        self._pool = pool
        self.cursor_cls = cursor_cls
        self.rowcount = -1
        self.lastrowid = None

    async def __aenter__(self) -> _FakeCursor:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def execute(self, sql: str, params: Any) -> int:
        self._pool.calls.append((sql, list(params), self.cursor_cls))
        if self._pool.error is not None:
            raise self._pool.error
        self.rowcount = self._pool.rowcount
        self.lastrowid = self._pool.lastrowid
        return self.rowcount

    async def fetchall(self) -> list[dict[str, Any]]:
        return list(self._pool.rows)


class _FakeMySQLConn:
    def __init__(self, pool: FakeMySQLPool) -> None:
        self._pool = pool

    def cursor(self, cursor_cls: Any = None) -> _FakeCursor:
        return _FakeCursor(self._pool, cursor_cls)


class FakeMySQLPool:
    """The slice of ``aiomysql.Pool`` used by MySQLConnection."""

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        rowcount: int = 1,
        lastrowid: int | None = 0,
    ) -> None:
        self.rows = rows or []
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.error: BaseException | None = None
        self.calls: list[tuple[str, list[Any], Any]] = []
        self.acquired = 0
        self.closed = False
        self.wait_closed_count = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        yield _FakeMySQLConn(self)

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        self.wait_closed_count += 1
