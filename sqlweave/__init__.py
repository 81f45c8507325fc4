"""sqlweave – composable, injection-safe SQL for MySQL and PostgreSQL.

Write SQL. Let the punctuation decide what's a parameter.

Public API
----------
``sql``
    Build a :class:`Statement` from literal segments and interpolated values.

``connect``
    Open a pooled async :class:`Connection` for a ``ConnectionConfig`` or URL.

Re-exported types
-----------------
``Statement``, ``ConnectionConfig``, ``Dialect``, ``Connection``, ``Table``,
``ExecResult``, ``ResolvedSQL``, and all error classes.

Composition rules
-----------------
An interpolated value's role is inferred from the literal text around it::

    sql(['SELECT * FROM "', '" WHERE id = ', ""], "users", 7)
    # postgres: SELECT * FROM "users" WHERE id = $1        params [7]
    # mysql:    SELECT * FROM `users` WHERE id = %s        params [7]

Values written between quotes become escaped identifiers, everything else
is bound as a parameter.  Mappings expand to ``(cols) VALUES (vals)`` after
``(`` and to ``col = val, ...`` after ``SET``.

Extensibility
-------------
New backends are registered via::

    from sqlweave.compile.registry import ConnectionFactory, ResolverFactory

    ResolverFactory.register_class(Dialect.SQLITE, SQLiteResolver)
    ConnectionFactory.register_class(Dialect.SQLITE, SQLiteConnection)

after adding the member to :class:`Dialect`.
"""

from __future__ import annotations

from sqlweave.compile.base import ResolvedSQL, SQLResolver
from sqlweave.compile.mysql import MySQLResolver
from sqlweave.compile.postgres import PostgresResolver
from sqlweave.compile.registry import ConnectionFactory, ResolverFactory
from sqlweave.db import (
    Connection,
    ExecResult,
    MySQLConnection,
    PostgresConnection,
    Table,
    close_all,
    connect,
    connected_databases,
)
from sqlweave.errors import (
    CompositionError,
    ConfigurationError,
    DriverError,
    DuplicateKeyError,
    MissingClauseError,
    SQLWeaveError,
)
from sqlweave.schema.config import ConnectionConfig, Dialect
from sqlweave.schema.converters import (
    table_from_sqlalchemy,
    tables_from_engine,
    tables_from_metadata,
)
from sqlweave.schema.statement import Statement, sql
from sqlweave.schema.values import OMITTED, FragmentKind

# ---------------------------------------------------------------------------
# Register built-in dialects
# ---------------------------------------------------------------------------

ResolverFactory.register_class(Dialect.MYSQL, MySQLResolver)
ResolverFactory.register_class(Dialect.POSTGRES, PostgresResolver)
ConnectionFactory.register_class(Dialect.MYSQL, MySQLConnection)
ConnectionFactory.register_class(Dialect.POSTGRES, PostgresConnection)

__all__ = [
    # Composition
    "sql",
    "Statement",
    "OMITTED",
    "FragmentKind",
    # Configuration
    "ConnectionConfig",
    "Dialect",
    # Resolution
    "ResolvedSQL",
    "SQLResolver",
    "MySQLResolver",
    "PostgresResolver",
    "ResolverFactory",
    "ConnectionFactory",
    # Execution
    "connect",
    "close_all",
    "connected_databases",
    "Connection",
    "MySQLConnection",
    "PostgresConnection",
    "ExecResult",
    "Table",
    # Converters
    "table_from_sqlalchemy",
    "tables_from_metadata",
    "tables_from_engine",
    # Errors
    "SQLWeaveError",
    "CompositionError",
    "MissingClauseError",
    "ConfigurationError",
    "DriverError",
    "DuplicateKeyError",
]
