"""Keyword vocabulary shared by the expression layer and statement builders.

Keywords are the wire contract between the vocabulary layer and the
builders: section keys, clause prefixes and operator words all come from
:class:`Keyword` and render verbatim in upper case.
"""

from __future__ import annotations

from enum import Enum


class Keyword(str, Enum):
    """SQL keywords used as section keys and rendered tokens."""

    # Statement leads / modifiers
    DESCRIBE = "DESCRIBE"
    EXPLAIN = "EXPLAIN"
    RAW = "RAW"
    WITH = "WITH"
    SELECT = "SELECT"
    DISTINCT = "DISTINCT"
    INSERT = "INSERT"
    IGNORE = "IGNORE"
    INTO = "INTO"
    COLUMNS = "COLUMNS"
    VALUES = "VALUES"
    ON_DUPLICATE = "ON DUPLICATE KEY UPDATE"
    UPDATE = "UPDATE"
    SET = "SET"
    DELETE = "DELETE"
    USING = "USING"
    RETURNING = "RETURNING"

    # Clauses
    FROM = "FROM"
    WHERE = "WHERE"
    JOIN = "JOIN"
    INNER_JOIN = "INNER JOIN"
    LEFT_JOIN = "LEFT JOIN"
    RIGHT_JOIN = "RIGHT JOIN"
    CROSS_JOIN = "CROSS JOIN"
    ON = "ON"
    GROUP_BY = "GROUP BY"
    HAVING = "HAVING"
    WINDOW = "WINDOW"
    ORDER_BY = "ORDER BY"
    PARTITION_BY = "PARTITION BY"
    OVER = "OVER"
    LIMIT = "LIMIT"
    OFFSET = "OFFSET"
    UNION = "UNION"
    UNION_ALL = "UNION ALL"
    LOCK = "LOCK"
    FOR_UPDATE = "FOR UPDATE"
    LOCK_IN_SHARE_MODE = "LOCK IN SHARE MODE"

    # Ordering
    ASC = "ASC"
    DESC = "DESC"
    NULLS_FIRST = "NULLS FIRST"
    NULLS_LAST = "NULLS LAST"

    # Expressions / predicates
    AS = "AS"
    CASE = "CASE"
    WHEN = "WHEN"
    THEN = "THEN"
    ELSE = "ELSE"
    END = "END"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    NULL = "NULL"
    IS = "IS"
    IS_NOT = "IS NOT"
    LIKE = "LIKE"
    IN = "IN"
    BETWEEN = "BETWEEN"
    EXISTS = "EXISTS"

    # Aggregates
    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"

    # DDL
    CREATE = "CREATE"
    ALTER = "ALTER"
    DROP = "DROP"
    TRUNCATE = "TRUNCATE"
    TABLE = "TABLE"
    ADD = "ADD"
    COLUMN = "COLUMN"
    CONSTRAINT = "CONSTRAINT"
    PRIMARY_KEY = "PRIMARY KEY"
    FOREIGN_KEY = "FOREIGN KEY"
    REFERENCES = "REFERENCES"
    UNIQUE = "UNIQUE"
    INDEX = "INDEX"
    DEFAULT = "DEFAULT"
    NOT_NULL = "NOT NULL"
    ON_DELETE = "ON DELETE"
    ON_UPDATE = "ON UPDATE"
    MODIFY_COLUMN = "MODIFY COLUMN"
    ALTER_COLUMN = "ALTER COLUMN"
    TYPE = "TYPE"
    RENAME_COLUMN = "RENAME COLUMN"
    RENAME_TO = "RENAME TO"
    TO = "TO"
    IF_EXISTS = "IF EXISTS"
    IF_NOT_EXISTS = "IF NOT EXISTS"
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    NO_ACTION = "NO ACTION"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Keyword groups (frozenset for O(1) membership tests)
# ---------------------------------------------------------------------------

#: Comparison operators accepted by ``SqlExpression.operator``.
OPERATORS: frozenset[str] = frozenset(
    {"=", "<", ">", "<=", ">=", "<>", "!=", "LIKE", "IN", "IS", "IS NOT"}
)

#: Directions accepted in ``order_by({column: direction})``.
ORDER_DIRECTIONS: frozenset[str] = frozenset(
    {Keyword.ASC.value, Keyword.DESC.value, Keyword.NULLS_FIRST.value, Keyword.NULLS_LAST.value}
)

#: Join types that take an ``ON`` / ``USING`` clause.
JOIN_TYPES: frozenset[str] = frozenset(
    {Keyword.INNER_JOIN.value, Keyword.LEFT_JOIN.value, Keyword.RIGHT_JOIN.value}
)

#: Referential actions for ``ON DELETE`` / ``ON UPDATE``.
REFERENTIAL_ACTIONS: frozenset[str] = frozenset(
    {
        Keyword.CASCADE.value,
        Keyword.RESTRICT.value,
        Keyword.SET_NULL.value,
        Keyword.SET_DEFAULT.value,
        Keyword.NO_ACTION.value,
    }
)
