"""sqlbrick expression layer: the generic node, the SQL vocabulary and keywords."""
from sqlbrick.expression.keywords import (
    JOIN_TYPES,
    OPERATORS,
    ORDER_DIRECTIONS,
    REFERENTIAL_ACTIONS,
    Keyword,
)
from sqlbrick.expression.node import DialectRule, Expression, ExpressionType, SupportsExpression
from sqlbrick.expression.sql import Quoter, SqlExpression

__all__ = [
    "Keyword",
    "OPERATORS",
    "ORDER_DIRECTIONS",
    "JOIN_TYPES",
    "REFERENTIAL_ACTIONS",
    "DialectRule",
    "Expression",
    "ExpressionType",
    "SupportsExpression",
    "Quoter",
    "SqlExpression",
]
