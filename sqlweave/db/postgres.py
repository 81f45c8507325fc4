"""PostgreSQL connection backed by an asyncpg pool."""

from __future__ import annotations

from typing import Any

import asyncpg

from sqlweave.db.base import Connection, ExecResult, Row
from sqlweave.schema.config import ConnectionConfig, Dialect

#: SQLSTATE ``unique_violation``.
UNIQUE_VIOLATION = "23505"


def affected_rows_from_status(status: str | None) -> int | None:
    """Parse the row count out of a command tag.

    ``"UPDATE 3"`` -> 3, ``"INSERT 0 1"`` -> 1, ``"CREATE TABLE"`` -> ``None``.
    """
    if not status:
        return None
    last = status.rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else None


class PostgresConnection(Connection):
    """Executes resolved statements on an ``asyncpg`` pool.

    Rows come back as plain ``dict`` objects.  Write statements report the
    server's command tag and the row count parsed from it.
    """

    dialect = Dialect.POSTGRES
    driver_errors = (asyncpg.PostgresError, asyncpg.InterfaceError)

    @classmethod
    async def create_pool(cls, config: ConnectionConfig) -> asyncpg.Pool:
        return await asyncpg.create_pool(**config.driver_kwargs())

    async def _query(self, sql: str, params: list[Any]) -> list[Row]:
        records = await self.pool.fetch(sql, *params)
        return [dict(record) for record in records]

    async def _query_exec(self, sql: str, params: list[Any]) -> ExecResult:
        status = await self.pool.execute(sql, *params)
        return ExecResult(affected_rows=affected_rows_from_status(status), status=status)

    async def _close_pool(self, pool: Any) -> None:
        await pool.close()

    def _error_code(self, exc: BaseException) -> str | None:
        return getattr(exc, "sqlstate", None)

    def _is_duplicate_key(self, code: str | int | None) -> bool:
        return code == UNIQUE_VIOLATION
