"""sqlweave execution layer: connections and table helpers."""
from __future__ import annotations

from sqlweave.compile.registry import ConnectionFactory
from sqlweave.db.base import Connection, ExecResult, Row, close_all, connected_databases
from sqlweave.db.mysql import MySQLConnection
from sqlweave.db.postgres import PostgresConnection
from sqlweave.db.table import Table
from sqlweave.schema.config import ConnectionConfig

__all__ = [
    "Connection",
    "ExecResult",
    "Row",
    "MySQLConnection",
    "PostgresConnection",
    "Table",
    "close_all",
    "connect",
    "connected_databases",
]


async def connect(config: ConnectionConfig | str) -> Connection:
    """Open a pooled connection for ``config``.

    Args:
        config: A ``ConnectionConfig`` or a ``mysql://`` / ``postgres://`` URL.

    Returns:
        A connection of the class registered for ``config.dialect``.

    Raises:
        ConfigurationError: If the dialect or URL scheme is unsupported.
    """
    if isinstance(config, str):
        config = ConnectionConfig.from_url(config)
    connection_cls = ConnectionFactory.get(config.dialect)
    return await connection_cls.from_config(config)
