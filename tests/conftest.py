"""Shared pytest fixtures for sqlbrick unit and integration tests."""
from __future__ import annotations

import pytest

from sqlbrick import DbalManager
from sqlbrick.dialect import MySQLDialect, PostgresDialect, SQLiteDialect
from sqlbrick.expression.sql import SqlExpression


@pytest.fixture(scope="session")
def mysql() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture(scope="session")
def postgres() -> PostgresDialect:
    return PostgresDialect()


@pytest.fixture(scope="session")
def sqlite() -> SQLiteDialect:
    return SQLiteDialect()


@pytest.fixture(scope="session")
def my_expr(mysql: MySQLDialect) -> SqlExpression:
    """Vocabulary prototype bound to MySQL."""
    return SqlExpression(dialect=mysql)


@pytest.fixture(scope="session")
def pg_expr(postgres: PostgresDialect) -> SqlExpression:
    """Vocabulary prototype bound to PostgreSQL."""
    return SqlExpression(dialect=postgres)


@pytest.fixture(scope="session")
def my_dbal() -> DbalManager:
    return DbalManager("mysql")


@pytest.fixture(scope="session")
def pg_dbal() -> DbalManager:
    return DbalManager("postgresql")


@pytest.fixture(scope="session")
def sq_dbal() -> DbalManager:
    return DbalManager("sqlite")
