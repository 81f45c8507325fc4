"""Utilities for building Table descriptors from SQLAlchemy schemas.

SQLAlchemy converter
--------------------
:func:`tables_from_engine` reflects a live database engine and returns one
:class:`~sqlweave.db.table.Table` per reflected table, keyed by name, with
``primary_key_name`` filled in from the table's primary key.

Install the optional dependency before using this module::

    pip install "sqlweave[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from sqlweave.schema.converters import tables_from_engine

    engine = create_engine("postgresql+psycopg://user:pw@host/db")
    tables = tables_from_engine(db, engine)
    row = await tables["users"].get(42)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlweave.errors import ConfigurationError

if TYPE_CHECKING:
    from sqlalchemy import Engine, MetaData
    from sqlalchemy import Table as SATable

    from sqlweave.db.base import Connection
    from sqlweave.db.table import Table


def table_from_sqlalchemy(db: Connection, sa_table: SATable) -> Table:
    """Build a :class:`Table` for a SQLAlchemy ``Table``.

    The SQLAlchemy name is the physical name, so the connection's prefix
    is stripped before handing it to :meth:`Connection.get_table` (which
    adds it back).  Composite or missing primary keys leave
    ``primary_key_name`` unset.

    Args:
        db: The connection the table will execute on.
        sa_table: A declared or reflected :class:`sqlalchemy.Table`.

    Returns:
        A Table bound to ``db``.

    Raises:
        ConfigurationError: If the table name does not start with the
            connection's prefix.
    """
    name = sa_table.name
    if db.prefix:
        if not name.startswith(db.prefix):
            raise ConfigurationError(
                f"Table '{name}' does not carry the connection prefix '{db.prefix}'",
                table=name,
            )
        name = name[len(db.prefix):]

    pk_columns = list(sa_table.primary_key.columns)
    primary_key_name = pk_columns[0].name if len(pk_columns) == 1 else None
    return db.get_table(name, primary_key_name)


def tables_from_metadata(db: Connection, metadata: MetaData) -> dict[str, Table]:
    """Build a :class:`Table` for every table in ``metadata``.

    Tables outside the connection's prefix are skipped.  Keys are the
    physical (prefixed) table names.
    """
    return {
        sa_table.name: table_from_sqlalchemy(db, sa_table)
        for sa_table in metadata.sorted_tables
        if sa_table.name.startswith(db.prefix)
    }


def tables_from_engine(
    db: Connection,
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> dict[str, Table]:
    """Reflect ``engine`` and build a :class:`Table` for each table found.

    Args:
        db: The connection the tables will execute on.
        engine: A :class:`sqlalchemy.engine.Engine` for the same database.
        include_tables: Optional allowlist of (prefixed) table names to
            reflect.  When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name, passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        Tables keyed by physical table name.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for tables_from_engine(). "
            'Install it with: pip install "sqlweave[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)
    return tables_from_metadata(db, metadata)
