"""Shared pytest fixtures for sqlweave unit and integration tests."""
from __future__ import annotations

import pytest

from sqlweave.compile.mysql import MySQLResolver
from sqlweave.compile.postgres import PostgresResolver
from sqlweave.db.base import connected_databases
from tests.fixtures import RecordingMySQL, RecordingPostgres


@pytest.fixture(autouse=True)
def _untrack_connections():
    """Keep the process-wide connection list from leaking between tests."""
    yield
    connected_databases.clear()


@pytest.fixture()
def pg() -> PostgresResolver:
    return PostgresResolver()


@pytest.fixture()
def my() -> MySQLResolver:
    return MySQLResolver()


@pytest.fixture()
def pg_db() -> RecordingPostgres:
    """In-memory PostgreSQL-dialect connection, no prefix."""
    return RecordingPostgres()


@pytest.fixture()
def my_db() -> RecordingMySQL:
    """In-memory MySQL-dialect connection, no prefix."""
    return RecordingMySQL()
