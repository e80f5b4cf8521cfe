"""sqlbrick dialect layer: backend-specific quoting and syntax rules."""
from sqlbrick.dialect.base import Feature, SQLDialect
from sqlbrick.dialect.mysql import MySQLDialect
from sqlbrick.dialect.postgres import PostgresDialect
from sqlbrick.dialect.registry import DialectFactory
from sqlbrick.dialect.sqlite import SQLiteDialect

__all__ = [
    "Feature",
    "SQLDialect",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
]
