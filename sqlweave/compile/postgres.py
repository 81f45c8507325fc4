"""PostgreSQL dialect resolver."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlweave.compile.base import SQLResolver, with_clause
from sqlweave.errors import ConfigurationError
from sqlweave.schema.statement import Statement, sql


class PostgresResolver(SQLResolver):
    """Resolves Statements to PostgreSQL-flavoured positional SQL.

    Parameter style: ``$1``, ``$2``, ... – native ``asyncpg`` placeholders.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def placeholder(self, index: int) -> str:
        return f"${index}"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def insert_ignore(
        self, table: str, row: Mapping[str, Any], where: Statement | None = None
    ) -> Statement:
        statement = sql(['INSERT INTO "', '" (', ") ON CONFLICT DO NOTHING"], table, row)
        return with_clause(statement, where)

    def upsert(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        update: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        self._require_primary_key("upsert", table, primary_key)
        statement = sql(
            ['INSERT INTO "', '" (', ') ON CONFLICT ("', '") DO UPDATE SET ', ""],
            table,
            row,
            primary_key,
            update,
        )
        return with_clause(statement, where)

    def replace(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        self._require_primary_key("replace", table, primary_key)
        return self.upsert(table, primary_key, row, row, where)

    def update_one(
        self, table: str, row: Mapping[str, Any], clause: Statement | None = None
    ) -> Statement:
        # UPDATE ... LIMIT is not PostgreSQL syntax; pick the row by ctid.
        statement = sql(
            ['UPDATE "', '" SET ', ' WHERE ctid = (SELECT ctid FROM "', '"'],
            table,
            row,
            table,
        )
        return with_clause(statement, clause).append_raw(" LIMIT 1)")

    def delete_one(self, table: str, clause: Statement | None = None) -> Statement:
        statement = sql(
            ['DELETE FROM "', '" WHERE ctid = (SELECT ctid FROM "', '"'], table, table
        )
        return with_clause(statement, clause).append_raw(" LIMIT 1)")

    @staticmethod
    def _require_primary_key(operation: str, table: str, primary_key: str | None) -> None:
        if not primary_key:
            raise ConfigurationError(
                f"Cannot {operation}() without a single-column primary key", table=table
            )
