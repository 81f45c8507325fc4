"""sqlweave resolution layer: Statement → dialect SQL + positional params."""
from sqlweave.compile.base import ResolvedSQL, SQLResolver
from sqlweave.compile.mysql import MySQLResolver
from sqlweave.compile.postgres import PostgresResolver
from sqlweave.compile.registry import ConnectionFactory, ResolverFactory

__all__ = [
    "ResolvedSQL",
    "SQLResolver",
    "MySQLResolver",
    "PostgresResolver",
    "ConnectionFactory",
    "ResolverFactory",
]
