"""MySQL connection backed by an aiomysql pool."""

from __future__ import annotations

from typing import Any

import aiomysql
from pymysql.err import MySQLError

from sqlweave.db.base import Connection, ExecResult, Row
from sqlweave.schema.config import ConnectionConfig, Dialect

#: MySQL error ``ER_DUP_ENTRY``.
ER_DUP_ENTRY = 1062


def decode_row(row: dict[str, Any]) -> Row:
    """Return ``row`` with binary column values decoded to ``str``.

    Bytes that are not valid UTF-8 decode with U+FFFD replacement characters.
    """
    return {
        column: (
            value.decode("utf-8", errors="replace")
            if isinstance(value, (bytes, bytearray))
            else value
        )
        for column, value in row.items()
    }


class MySQLConnection(Connection):
    """Executes resolved statements on an ``aiomysql`` pool.

    Each statement runs on a connection acquired from the pool for the
    duration of the call, through a ``DictCursor``.  The pool is created
    with ``autocommit=True``; no transaction spans two calls.
    """

    dialect = Dialect.MYSQL
    driver_errors = (MySQLError,)

    @classmethod
    async def create_pool(cls, config: ConnectionConfig) -> aiomysql.Pool:
        return await aiomysql.create_pool(**config.driver_kwargs())

    async def _query(self, sql: str, params: list[Any]) -> list[Row]:
        async with self.pool.acquire() as conn:
            async with conn.cursor(aiomysql.DictCursor) as cursor:
                await cursor.execute(sql, params)
                rows = await cursor.fetchall()
        return [decode_row(row) for row in rows or ()]

    async def _query_exec(self, sql: str, params: list[Any]) -> ExecResult:
        async with self.pool.acquire() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(sql, params)
                return ExecResult(
                    affected_rows=cursor.rowcount,
                    last_insert_id=cursor.lastrowid or None,
                )

    async def _close_pool(self, pool: Any) -> None:
        pool.close()
        await pool.wait_closed()

    def _error_code(self, exc: BaseException) -> int | None:
        code = exc.args[0] if exc.args else None
        return code if isinstance(code, int) else None

    def _error_message(self, exc: BaseException) -> str:
        if len(exc.args) >= 2:
            return str(exc.args[1])
        return super()._error_message(exc)

    def _is_duplicate_key(self, code: str | int | None) -> bool:
        return code == ER_DUP_ENTRY
