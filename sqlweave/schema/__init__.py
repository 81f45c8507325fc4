"""sqlweave schema layer: statements, interpolation values, configuration."""
from sqlweave.schema.config import ConnectionConfig, Dialect
from sqlweave.schema.statement import Statement, sql
from sqlweave.schema.values import (
    IDENTIFIER_QUOTES,
    OMITTED,
    FragmentKind,
    Scalar,
    classify,
    is_statement,
)

__all__ = [
    "ConnectionConfig",
    "Dialect",
    "Statement",
    "sql",
    "FragmentKind",
    "Scalar",
    "OMITTED",
    "IDENTIFIER_QUOTES",
    "classify",
    "is_statement",
]
