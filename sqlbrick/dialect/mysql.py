"""MySQL dialect."""

from __future__ import annotations

from sqlbrick.dialect.base import Feature, SQLDialect


class MySQLDialect(SQLDialect):
    """MySQL / MariaDB quoting and syntax rules.

    Parameter style: ``%(name)s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` named-parameter execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    Backslash is an escape character inside MySQL string literals (unless
    ``NO_BACKSLASH_ESCAPES`` is set), so it is doubled as well.
    """

    identifier_quote = "`"
    supported_features = frozenset(
        {
            Feature.IF_NOT_EXISTS,
            Feature.IF_EXISTS,
            Feature.AUTO_INCREMENT,
            Feature.ON_DUPLICATE_KEY_UPDATE,
            Feature.INSERT_IGNORE,
            Feature.CTE,
            Feature.WINDOW_FUNCTIONS,
            Feature.INLINE_INDEX,
            Feature.MODIFY_COLUMN,
            Feature.TRUNCATE,
        }
    )

    @property
    def name(self) -> str:
        return "mysql"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

    def escape_string(self, text: str) -> str:
        return super().escape_string(text.replace("\\", "\\\\"))

    def limit_clause(self, limit: int, offset: int | None = None) -> str:
        if offset is not None:
            return f"LIMIT {offset}, {limit}"
        return f"LIMIT {limit}"
