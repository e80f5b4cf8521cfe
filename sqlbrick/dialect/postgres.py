"""PostgreSQL dialect."""

from __future__ import annotations

from sqlbrick.dialect.base import Feature, SQLDialect


class PostgresDialect(SQLDialect):
    """PostgreSQL quoting and syntax rules.

    Parameter style: ``%(name)s`` – compatible with ``psycopg2`` and
    ``psycopg`` named-parameter execution.  Booleans render as the native
    ``TRUE`` / ``FALSE`` literals.
    """

    supported_features = frozenset(
        {
            Feature.IF_NOT_EXISTS,
            Feature.IF_EXISTS,
            Feature.RETURNING,
            Feature.WINDOW_FUNCTIONS,
            Feature.CTE,
            Feature.ALTER_COLUMN_TYPE,
            Feature.TRUNCATE,
            Feature.CASCADE,
        }
    )

    @property
    def name(self) -> str:
        return "postgresql"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

    def boolean_literal(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"
