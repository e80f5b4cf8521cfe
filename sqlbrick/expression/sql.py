"""SQL vocabulary layer on top of the generic expression node.

``SqlExpression`` binds a node to a :class:`~sqlbrick.dialect.base.SQLDialect`
and adds node-construction helpers that stamp SQL meaning onto new nodes:
keywords, identifiers, values, operators, aliases, conditions, CASE and
function calls.  Every helper returns a *new* node; the receiver is never
modified, so a single ``SqlExpression`` can serve as the prototype for a
whole statement.

The dialect is a constructor dependency.  Identifier, value and parameter
quoting are registered as :class:`~sqlbrick.expression.node.DialectRule`
decorators and resolved at render time, so :meth:`SqlExpression.set_dialect`
before rendering changes all subsequent output.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from sqlbrick.dialect.base import SQLDialect
from sqlbrick.errors import ConfigurationError, InvalidArgumentError, InvalidOperatorError
from sqlbrick.expression.keywords import OPERATORS, Keyword
from sqlbrick.expression.node import (
    Decorator,
    DialectRule,
    Expression,
    ExpressionType,
    SupportsExpression,
)

#: External string-quoting primitive, e.g. a driver connection's ``quote``.
Quoter = Callable[[str], str]


class SqlExpression(Expression):
    """An expression node bound to a dialect.

    Args:
        *items: Initial children.
        dialect: The dialect used for identifier / value / parameter rules.
        quoter: Optional driver-supplied quoting function for string
            literals.  ``NULL``, booleans and numbers always follow the
            dialect.

    Raises:
        ConfigurationError: If ``dialect`` is missing or not a
            :class:`SQLDialect`.
    """

    def __init__(
        self,
        *items: Any,
        dialect: SQLDialect | None = None,
        quoter: Quoter | None = None,
    ) -> None:
        if not isinstance(dialect, SQLDialect):
            raise ConfigurationError(
                f"SqlExpression requires a SQLDialect instance, got {type(dialect).__name__}."
            )
        self._dialect = dialect
        self._quoter = quoter
        super().__init__(*items)

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    @property
    def quoter(self) -> Quoter | None:
        return self._quoter

    def _spawn(self) -> SqlExpression:
        return self.__class__(dialect=self._dialect, quoter=self._quoter)

    def set_dialect(self, dialect: SQLDialect) -> SqlExpression:
        """Rebind this node and every descendant node to ``dialect``.

        Embedded statement builders are left alone; they are rendered
        under the embedding node's dialect instead (see
        :meth:`_adopt`).  Strings rendered earlier are unaffected.
        """
        if not isinstance(dialect, SQLDialect):
            raise ConfigurationError(f"Expected a SQLDialect instance, got {type(dialect).__name__}.")
        self._dialect = dialect
        for child in (*self._children, self._separator):
            if isinstance(child, SqlExpression):
                child.set_dialect(dialect)
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> SqlExpression:
        # the dialect and quoter are shared, never copied
        clone = self.prototype()
        memo[id(self)] = clone
        clone._separator = copy.deepcopy(self._separator, memo)
        clone._children = copy.deepcopy(self._children, memo)
        return clone

    def _render_child(self, child: Any) -> str:
        if not isinstance(child, Expression) and isinstance(child, SupportsExpression):
            child = self._adopt(child)
        return super()._render_child(child)

    def _adopt(self, statement: Any) -> Any:
        """Return ``statement`` as it renders under this node's dialect.

        A builder bound to another dialect is copied and the copy is
        rebound; the caller's builder is never modified.
        """
        dialect = getattr(statement, "dialect", None)
        if (
            not isinstance(dialect, SQLDialect)
            or dialect == self._dialect
            or not hasattr(statement, "set_dialect")
        ):
            return statement
        return copy.deepcopy(statement).set_dialect(self._dialect)

    def _apply(self, decorator: Decorator, value: Any) -> str:
        if decorator is DialectRule.IDENTIFIER:
            return self._dialect.quote_identifier(str(value))
        if decorator is DialectRule.VALUE:
            if self._quoter is not None and isinstance(value, str):
                return self._quoter(value)
            return self._dialect.quote_value(value)
        if decorator is DialectRule.PARAM:
            return self._dialect.param_placeholder(str(value))
        return super()._apply(decorator, value)

    # ------------------------------------------------------------------
    # Node construction
    # ------------------------------------------------------------------

    def expression(self, *items: Any) -> SqlExpression:
        """Return a fresh, rule-less node bound to the same dialect."""
        return self._spawn().push(*items)

    def group(self, *items: Any) -> SqlExpression:
        """Return ``(<items>)`` as a new group node."""
        return self.expression(*items).wrap("(", ")").type(ExpressionType.GROUP)

    def raw(self, sql: Any) -> SqlExpression:
        return self.expression(sql)

    def keyword(self, word: str) -> SqlExpression:
        """Return an upper-cased, unquoted keyword node."""
        if not str(word).strip():
            raise InvalidArgumentError("Keyword must not be empty.", argument="word")
        return self.expression(str(word).upper()).type(ExpressionType.KEYWORD)

    def identifier(self, name: str | Expression) -> SqlExpression:
        """Return a dialect-quoted identifier node.

        Qualified names are quoted part by part; already-quoted names pass
        through unchanged.
        """
        if isinstance(name, Expression):
            return name
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Invalid identifier: {name!r}.", argument="name")
        return (
            self.expression(name)
            .decorate(DialectRule.IDENTIFIER)
            .type(ExpressionType.IDENTIFIER)
        )

    def quote(self, value: Any) -> SqlExpression:
        """Return ``value`` as a dialect-quoted literal node."""
        if value is None:
            return self.keyword(Keyword.NULL)
        return self.expression(value).decorate_item(DialectRule.VALUE)

    def value(self, value: Any) -> SqlExpression:
        return self.quote(value).type(ExpressionType.VALUE)

    def param(self, name: str) -> SqlExpression:
        """Return a named placeholder in the dialect's parameter style."""
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Invalid parameter name: {name!r}.", argument="name")
        return self.expression(name).decorate_item(DialectRule.PARAM).type(ExpressionType.VALUE)

    def operator(self, operator: str) -> SqlExpression:
        """Return an operator node.

        Raises:
            InvalidOperatorError: If ``operator`` is not in the allow-list.
        """
        normalized = " ".join(str(operator).upper().split())
        if normalized not in OPERATORS:
            raise InvalidOperatorError(str(operator), sorted(OPERATORS))
        return self.expression(normalized).type(ExpressionType.OPERATOR)

    def alias(self, alias: str, expression: Any) -> SqlExpression:
        """Return ``<expression> AS <alias>``.

        Node expressions are parenthesized inside a new group so the
        caller's node keeps its own render rules.
        """
        return self.expression(
            self._parenthesize(expression) if _is_node(expression) else self.identifier(expression),
            self.keyword(Keyword.AS),
            self.identifier(alias),
        ).type(ExpressionType.ALIAS)

    def condition(self, left: Any, operator: str, right: Any = None) -> SqlExpression:
        """Return ``<left> <operator> <right>``.

        ``left`` is parenthesized when it is a node and quoted as an
        identifier otherwise.  ``right`` resolves as: ``None`` → ``NULL``;
        node → as is; statement → parenthesized subquery; any other
        non-string iterable → ``(a,b,...)`` of quoted values; else a value
        through the dialect (numbers raw, NaN and infinity rejected).
        """
        return self.expression(
            self._parenthesize(left) if _is_node(left) else self.identifier(left),
            self.operator(operator),
            self._operand(right),
        ).type(ExpressionType.CONDITION)

    def in_(self, column: Any, values: Any) -> SqlExpression:
        return self.condition(column, Keyword.IN, values)

    def like(self, column: Any, value: Any) -> SqlExpression:
        return self.condition(column, Keyword.LIKE, value)

    def is_null(self, column: Any) -> SqlExpression:
        return self.condition(column, Keyword.IS, None)

    def is_not_null(self, column: Any) -> SqlExpression:
        return self.condition(column, Keyword.IS_NOT, None)

    def between(self, column: Any, low: Any, high: Any) -> SqlExpression:
        """Return ``<column> BETWEEN <low> AND <high>``."""
        return self.expression(
            self._parenthesize(column) if _is_node(column) else self.identifier(column),
            self.keyword(Keyword.BETWEEN),
            self._operand(low),
            self.keyword(Keyword.AND),
            self._operand(high),
        ).type(ExpressionType.CONDITION)

    def case(self, condition: Any, then: Any, else_: Any = None) -> SqlExpression:
        """Return ``CASE WHEN <condition> THEN <then> [ELSE <else>] END``."""
        case = (
            self.expression(
                self.keyword(Keyword.WHEN),
                self._parenthesize(condition) if _is_node(condition) else condition,
                self.keyword(Keyword.THEN),
                self._case_value(then),
            )
            .wrap(f"{Keyword.CASE} ", f" {Keyword.END}")
            .type(ExpressionType.GROUP)
        )
        if else_ is not None:
            case.push(self.keyword(Keyword.ELSE), self._case_value(else_))
        return case

    def fn(self, name: str, column: Any = "*") -> SqlExpression:
        """Return ``NAME(<column>)``; ``*`` stays bare, nodes are used as is."""
        if _is_node(column):
            argument = column
        elif column == "*":
            argument = "*"
        else:
            argument = self.identifier(column)
        return self.expression(
            self.keyword(name),
            self.expression(argument).wrap("(", ")"),
        ).join("")

    def count(self, column: Any = "*") -> SqlExpression:
        return self.fn(Keyword.COUNT, column)

    def sum(self, column: Any) -> SqlExpression:
        return self.fn(Keyword.SUM, column)

    def avg(self, column: Any) -> SqlExpression:
        return self.fn(Keyword.AVG, column)

    def min(self, column: Any) -> SqlExpression:
        return self.fn(Keyword.MIN, column)

    def max(self, column: Any) -> SqlExpression:
        return self.fn(Keyword.MAX, column)

    def over(
        self,
        expression: Any,
        partition_by: str | Sequence[str] | None = None,
        order_by: str | Sequence[str] | None = None,
    ) -> SqlExpression:
        """Return ``<expression> OVER (PARTITION BY ... ORDER BY ...)``."""
        return self.expression(
            expression if _is_node(expression) else self.raw(expression),
            self.keyword(Keyword.OVER),
            self.window_spec(partition_by, order_by),
        )

    def window_spec(
        self,
        partition_by: str | Sequence[str] | None = None,
        order_by: str | Sequence[str] | None = None,
    ) -> SqlExpression:
        """Return ``(PARTITION BY ... ORDER BY ...)``; either part may be omitted."""
        spec = self.group()
        if partition_by:
            spec.push(self.keyword(Keyword.PARTITION_BY), self.identifier_list(partition_by))
        if order_by:
            spec.push(self.keyword(Keyword.ORDER_BY), self.identifier_list(order_by))
        return spec

    def identifier_list(self, names: str | Sequence[str]) -> SqlExpression:
        """Return a comma-joined list of identifiers."""
        if isinstance(names, str):
            names = [names]
        return (
            self.expression(*(self.identifier(name) for name in names))
            .join(", ")
            .type(ExpressionType.LIST)
        )

    def value_list(self, values: Iterable[Any]) -> SqlExpression:
        """Return ``(v1,v2,...)`` with every scalar item quoted.

        Any iterable is accepted (sets, ranges, generators); it is consumed
        once, in iteration order.
        """
        values = list(values)
        if not values:
            raise InvalidArgumentError("A value list requires at least one value.", argument="values")
        node = self.expression().join(",").wrap("(", ")").decorate_item(DialectRule.VALUE)
        for item in values:
            # push() skips None, so NULL items become keyword nodes
            node.push(self.keyword(Keyword.NULL) if item is None else item)
        return node.type(ExpressionType.LIST)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parenthesize(self, node: Any) -> SqlExpression:
        return self.group(node)

    def _operand(self, value: Any) -> Any:
        if value is None:
            return self.keyword(Keyword.NULL)
        if isinstance(value, Expression):
            return value
        if isinstance(value, SupportsExpression):
            return self._parenthesize(value)
        if is_value_collection(value):
            return self.value_list(value)
        return self.value(value)

    def _case_value(self, value: Any) -> Any:
        return self._parenthesize(value) if _is_node(value) else self.value(value)


def _is_node(value: Any) -> bool:
    return isinstance(value, (Expression, SupportsExpression))


def is_value_collection(value: Any) -> bool:
    """Return True for iterables that stand for a list of SQL values.

    Strings, bytes, mappings, nodes and statements are single operands.
    """
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, bytearray, Mapping, Expression, SupportsExpression)
    )
