"""SQLite dialect."""
from __future__ import annotations

from sqlbrick.dialect.base import Feature, SQLDialect


class SQLiteDialect(SQLDialect):
    """SQLite quoting and syntax rules.

    Parameter style: ``:name`` – compatible with Python's built-in
    ``sqlite3`` named-parameter execution (``cursor.execute(sql, dict)``).

    Note: SQLite has no ``TRUNCATE`` and no ``ALTER COLUMN``; booleans are
    stored as ``1`` / ``0``.
    """

    supported_features = frozenset(
        {
            Feature.IF_NOT_EXISTS,
            Feature.IF_EXISTS,
            Feature.RETURNING,
            Feature.CTE,
            Feature.WINDOW_FUNCTIONS,
        }
    )

    @property
    def name(self) -> str:
        return "sqlite"
