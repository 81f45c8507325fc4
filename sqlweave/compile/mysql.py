"""MySQL dialect resolver."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlweave.compile.base import SQLResolver, assignments, with_clause
from sqlweave.schema.statement import Statement, sql


class MySQLResolver(SQLResolver):
    """Resolves Statements to MySQL-flavoured positional SQL.

    Parameter style: ``%s`` – the anonymous positional marker of
    ``PyMySQL`` / ``aiomysql``.  Those drivers always run ``%``-formatting
    over the query text, so literal ``%`` characters are doubled.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def placeholder(self, index: int) -> str:
        return "%s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def literal_text(self, text: str) -> str:
        return text.replace("%", "%%")

    def insert_ignore(
        self, table: str, row: Mapping[str, Any], where: Statement | None = None
    ) -> Statement:
        statement = sql(['INSERT IGNORE INTO "', '" (', ")"], table, row)
        return with_clause(statement, where)

    def upsert(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        update: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        # MySQL finds the conflicting key itself; primary_key is not needed.
        statement = sql(
            ['INSERT INTO "', '" (', ") ON DUPLICATE KEY UPDATE ", ""],
            table,
            row,
            assignments(update),
        )
        return with_clause(statement, where)

    def replace(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        statement = sql(['REPLACE INTO "', '" (', ")"], table, row)
        return with_clause(statement, where)
