"""Table-scoped convenience API.

``Table`` generates the common single-table statement shapes and executes
them through its :class:`~sqlweave.db.base.Connection`.  Clauses are passed
as Statements and appended after the generated text::

    users = db.get_table("users", primary_key_name="id")

    await users.insert({"name": "Ada", "age": 36})
    await users.update_all({"status": "done"}, sql(["WHERE age > ", ""], 30))
    row = await users.get(42)

UPDATE and DELETE refuse to run without a clause unless ``all_rows=True``
is passed, so an accidentally empty clause never rewrites the whole table.
Statement shapes that differ between backends (upsert, replace, single-row
update/delete) come from the connection's resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlweave.compile.base import with_clause
from sqlweave.errors import (
    CompositionError,
    ConfigurationError,
    DuplicateKeyError,
    MissingClauseError,
)
from sqlweave.schema.statement import Statement, sql
from sqlweave.schema.values import Scalar, is_statement

if TYPE_CHECKING:
    from sqlweave.db.base import Connection, ExecResult, Row

logger = logging.getLogger(__name__)

#: Column selection: ``None`` for ``*``, names, or a raw Statement.
Columns = Sequence[str] | Statement | None


class Table:
    """A named, optionally keyed handle on one table.

    Args:
        db: Connection to execute on.
        name: Table name without the connection prefix.
        primary_key_name: Single-column primary key, required by the keyed
            operations (:meth:`get`, :meth:`delete`, :meth:`update`) and by
            :meth:`upsert`/:meth:`replace` on PostgreSQL.
    """

    def __init__(
        self,
        db: Connection,
        name: str,
        primary_key_name: str | None = None,
    ) -> None:
        self._db = db
        self._name = db.prefix + name
        self._primary_key_name = primary_key_name

    @property
    def db(self) -> Connection:
        return self._db

    @property
    def name(self) -> str:
        """The prefixed table name."""
        return self._name

    @property
    def primary_key_name(self) -> str | None:
        return self._primary_key_name

    def escape_id(self, name: str) -> str:
        return self._db.escape_id(name)

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, primary_key_name={self._primary_key_name!r})"

    # ------------------------------------------------------------------
    # Raw
    # ------------------------------------------------------------------

    async def query(self, statement: Statement) -> list[Row]:
        return await self._db.query(statement)

    async def query_one(self, statement: Statement) -> Row | None:
        return await self._db.query_one(statement)

    async def query_exec(self, statement: Statement) -> ExecResult:
        return await self._db.query_exec(statement)

    async def query_sql(self, strings: Sequence[str] | str, *values: Any) -> list[Row]:
        return await self._db.query_sql(strings, *values)

    async def query_one_sql(self, strings: Sequence[str] | str, *values: Any) -> Row | None:
        return await self._db.query_one_sql(strings, *values)

    async def query_exec_sql(self, strings: Sequence[str] | str, *values: Any) -> ExecResult:
        return await self._db.query_exec_sql(strings, *values)

    # ------------------------------------------------------------------
    # Low-level
    # ------------------------------------------------------------------

    async def select_all(
        self, columns: Columns = None, clause: Statement | None = None
    ) -> list[Row]:
        """``SELECT <columns> FROM <table> <clause>``."""
        return await self._db.query(self._select(columns, clause))

    async def select_one(
        self, columns: Columns = None, clause: Statement | None = None
    ) -> Row | None:
        """``SELECT <columns> FROM <table> <clause> LIMIT 1``; ``None`` if no row."""
        statement = self._select(columns, clause).append_raw(" LIMIT 1")
        return await self._db.query_one(statement)

    async def update_all(
        self,
        row: Mapping[str, Any],
        clause: Statement | None = None,
        *,
        all_rows: bool = False,
    ) -> ExecResult:
        """``UPDATE <table> SET <row> <clause>``."""
        self._require_clause("UPDATE", clause, all_rows)
        statement = sql(['UPDATE "', '" SET ', ""], self._name, row)
        return await self._db.query_exec(with_clause(statement, clause))

    async def update_one(
        self,
        row: Mapping[str, Any],
        clause: Statement | None = None,
        *,
        all_rows: bool = False,
    ) -> ExecResult:
        """Like :meth:`update_all`, limited to one row."""
        self._require_clause("UPDATE", clause, all_rows)
        statement = self._db.resolver.update_one(self._name, row, clause)
        return await self._db.query_exec(statement)

    async def delete_all(
        self, clause: Statement | None = None, *, all_rows: bool = False
    ) -> ExecResult:
        """``DELETE FROM <table> <clause>``."""
        self._require_clause("DELETE", clause, all_rows)
        statement = sql(['DELETE FROM "', '"'], self._name)
        return await self._db.query_exec(with_clause(statement, clause))

    async def delete_one(
        self, clause: Statement | None = None, *, all_rows: bool = False
    ) -> ExecResult:
        """Like :meth:`delete_all`, limited to one row."""
        self._require_clause("DELETE", clause, all_rows)
        statement = self._db.resolver.delete_one(self._name, clause)
        return await self._db.query_exec(statement)

    async def eval(self, expr: Statement, clause: Statement | None = None) -> Any:
        """Evaluate ``expr`` against the table and return the scalar, or ``None``.

        Example::

            total = await users.eval(sql("COUNT(*)"))
        """
        statement = sql(["SELECT ", ' AS result FROM "', '"'], expr, self._name)
        row = await self._db.query_one(with_clause(statement, clause).append_raw(" LIMIT 1"))
        return row["result"] if row else None

    # ------------------------------------------------------------------
    # High-level
    # ------------------------------------------------------------------

    async def insert(
        self, row: Mapping[str, Any], where: Statement | None = None
    ) -> ExecResult:
        """``INSERT INTO <table> (<columns>) VALUES (<values>) <where>``.

        Runs as a write statement, so rows from a ``RETURNING`` clause are not
        returned; compose the INSERT yourself and pass it to :meth:`query` to
        read them.
        """
        statement = sql(['INSERT INTO "', '" (', ")"], self._name, row)
        return await self._db.query_exec(with_clause(statement, where))

    async def insert_ignore(
        self, row: Mapping[str, Any], where: Statement | None = None
    ) -> ExecResult:
        """Insert ``row``, skipping it silently if it violates a unique key."""
        statement = self._db.resolver.insert_ignore(self._name, row, where)
        return await self._db.query_exec(statement)

    async def try_insert(
        self, row: Mapping[str, Any], where: Statement | None = None
    ) -> ExecResult | None:
        """Insert ``row``; return ``None`` instead of raising on a duplicate key.

        Any other driver failure propagates.
        """
        try:
            return await self.insert(row, where)
        except DuplicateKeyError as exc:
            logger.debug("Duplicate key on %s ignored: %s", self._name, exc.message)
            return None

    async def upsert(
        self,
        row: Mapping[str, Any],
        update: Mapping[str, Any] | None = None,
        where: Statement | None = None,
    ) -> ExecResult:
        """Insert ``row``, or apply ``update`` (default: ``row``) on conflict."""
        statement = self._db.resolver.upsert(
            self._name,
            self._primary_key_name,
            row,
            row if update is None else update,
            where,
        )
        return await self._db.query_exec(statement)

    async def replace(
        self, row: Mapping[str, Any], where: Statement | None = None
    ) -> ExecResult:
        """Insert ``row``, overwriting any existing row with the same key."""
        statement = self._db.resolver.replace(
            self._name, self._primary_key_name, row, where
        )
        return await self._db.query_exec(statement)

    async def get(self, primary_key: Scalar, columns: Columns = None) -> Row | None:
        """Fetch the row whose primary key equals ``primary_key``."""
        return await self.select_one(columns, self._key_clause("get", primary_key))

    async def delete(self, primary_key: Scalar) -> ExecResult:
        """Delete the row whose primary key equals ``primary_key``."""
        return await self.delete_all(self._key_clause("delete", primary_key))

    async def update(self, primary_key: Scalar, row: Mapping[str, Any]) -> ExecResult:
        """Apply ``row`` to the row whose primary key equals ``primary_key``."""
        return await self.update_all(row, self._key_clause("update", primary_key))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _select(self, columns: Columns, clause: Statement | None) -> Statement:
        statement = sql(["SELECT ", ' FROM "', '"'], self._columns(columns), self._name)
        return with_clause(statement, clause)

    @staticmethod
    def _columns(columns: Columns) -> Statement:
        if columns is None:
            return sql("*")
        if is_statement(columns):
            return columns
        names = list(columns)
        if not names:
            raise CompositionError("Cannot select an empty column list.")
        return sql(['"', '"'], names)

    def _key_clause(self, operation: str, primary_key: Scalar) -> Statement:
        if not self._primary_key_name:
            raise ConfigurationError(
                f"Cannot {operation}() without a single-column primary key",
                table=self._name,
            )
        return sql(['WHERE "', '" = ', ""], self._primary_key_name, primary_key)

    def _require_clause(
        self, operation: str, clause: Statement | None, all_rows: bool
    ) -> None:
        if all_rows or (clause is not None and clause):
            return
        raise MissingClauseError(operation, self._name)
