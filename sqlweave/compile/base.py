"""Resolver abstractions: ResolvedSQL and the SQLResolver ABC.

The Template Method pattern (GoF) is used:
- ``SQLResolver.resolve`` walks a Statement and decides, per parameter,
  between an inline identifier and a bound placeholder.
- ``MySQLResolver`` and ``PostgresResolver`` override the dialect-specific
  steps (placeholder style, identifier quoting, literal escaping) and the
  statement shapes that differ between backends (upsert, replace, ...).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlweave.errors import CompositionError
from sqlweave.schema.statement import Statement, sql
from sqlweave.schema.values import FragmentKind, classify

_QUOTES = ('"', "`")


@dataclass
class ResolvedSQL:
    """The output of resolving a Statement for one dialect.

    Attributes:
        sql: Final SQL text with positional placeholders.
        params: Values for the placeholders, in placeholder order.
        dialect: The target dialect name (``'mysql'`` or ``'postgres'``).
    """

    sql: str
    params: list[Any] = field(default_factory=list)
    dialect: str = ""


def with_clause(statement: Statement, clause: Statement | None) -> Statement:
    """Append ``clause`` after a space unless it is missing or empty."""
    if clause is not None and clause:
        statement.append_raw(" ").append(clause)
    return statement


def assignments(row: Mapping[str, Any]) -> Statement:
    """Build ``"a" = 1, "b" = 2`` without relying on a preceding ``SET``.

    ``OMITTED`` values drop their column, as in mapping composition.
    """
    row = {k: v for k, v in row.items() if classify(v) is not FragmentKind.ABSENT}
    if not row:
        raise CompositionError("Cannot build an assignment list from an empty mapping.")
    return Statement.join(
        (sql(['"', '" = ', ""], column, value) for column, value in row.items()),
        ", ",
    )


class SQLResolver(ABC):
    """Abstract base for dialect-specific resolvers.

    Subclasses implement the dialect-specific methods; ``Connection`` and
    ``Table`` use this interface via the Strategy / Template Method patterns.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'`` or ``'postgres'``)."""

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Return the placeholder for the ``index``-th bound parameter (1-based)."""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (table or column name).

        Returns:
            Quoted identifier with embedded quote characters escaped.
        """

    def literal_text(self, text: str) -> str:
        """Escape literal SQL text for the driver; identity by default."""
        return text

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, statement: Statement) -> ResolvedSQL:
        """Flatten ``statement`` into SQL text and a positional parameter list.

        A parameter whose following fragment opens with an identifier quote
        was written between quotes in the literal text, so it is spliced in
        as an escaped identifier instead of being bound.

        Raises:
            CompositionError: If ``NULL`` is used as an identifier.
        """
        fragments = statement.fragments
        text = self.literal_text(fragments[0])
        params: list[Any] = []
        for i, value in enumerate(statement.parameters):
            following = fragments[i + 1]
            if following.startswith(_QUOTES):
                if value is None:
                    raise CompositionError(
                        "Cannot use NULL as an identifier.", trailing=fragments[i]
                    )
                if text.endswith(_QUOTES):
                    text = text[:-1]
                text += self.literal_text(self.quote_identifier(str(value)))
                text += self.literal_text(following[1:])
            else:
                params.append(value)
                text += self.placeholder(len(params)) + self.literal_text(following)
        return ResolvedSQL(sql=text, params=params, dialect=self.dialect_name)

    # ------------------------------------------------------------------
    # Statement shapes that differ between backends
    # ------------------------------------------------------------------

    @abstractmethod
    def insert_ignore(
        self, table: str, row: Mapping[str, Any], where: Statement | None = None
    ) -> Statement:
        """INSERT that silently skips rows violating a unique constraint."""

    @abstractmethod
    def upsert(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        update: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        """INSERT ``row``, or apply ``update`` to the existing row on conflict."""

    @abstractmethod
    def replace(
        self,
        table: str,
        primary_key: str | None,
        row: Mapping[str, Any],
        where: Statement | None = None,
    ) -> Statement:
        """INSERT ``row``, overwriting the existing row on conflict."""

    def update_one(
        self, table: str, row: Mapping[str, Any], clause: Statement | None = None
    ) -> Statement:
        """UPDATE at most one row matching ``clause``."""
        statement = sql(['UPDATE "', '" SET ', ""], table, row)
        return with_clause(statement, clause).append_raw(" LIMIT 1")

    def delete_one(self, table: str, clause: Statement | None = None) -> Statement:
        """DELETE at most one row matching ``clause``."""
        statement = sql(['DELETE FROM "', '"'], table)
        return with_clause(statement, clause).append_raw(" LIMIT 1")
