"""Clause-level SQL helpers.

Each class handles exactly one recurring clause shape and returns a new
expression node built from the shared vocabulary prototype.  The statement
builders in this package push those nodes into their sections.

Classes
-------
AliasableListBuilder  ``a, b AS "x", (subquery) AS "y", *``
ConditionBuilder      ``(c1 AND c2 ...)`` and ``AND`` / ``OR`` chaining
AssignmentBuilder     ``"a" = 1, "b" = 'x'``
JoinBuilder           ``<TYPE> JOIN <table> [AS alias] ON (...) | USING (...)``
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlbrick.errors import InvalidArgumentError
from sqlbrick.expression.keywords import JOIN_TYPES, Keyword
from sqlbrick.expression.node import Expression, ExpressionType, SupportsExpression
from sqlbrick.expression.sql import SqlExpression, is_value_collection


def flatten(items: Iterable[Any]) -> list[Any]:
    """Flatten nested lists and tuples one item at a time; ``None`` is dropped."""
    flat: list[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten(item))
        elif item is not None:
            flat.append(item)
    return flat


class AliasableListBuilder:
    """Builds comma-separated lists of columns, tables or subqueries."""

    def __init__(self, expr: SqlExpression) -> None:
        self._expr = expr

    def build(self, *items: Any) -> SqlExpression:
        """Return a ``LIST`` node for ``items``.

        Args:
            *items: Names, nodes, statements, ``{alias: source}`` mappings or
                lists/tuples of those.

        Raises:
            InvalidArgumentError: If nothing is left after flattening.
        """
        flat = flatten(items)
        if not flat:
            raise InvalidArgumentError("An aliasable list requires at least one item.", argument="items")
        node = self._expr.expression().join(", ").type(ExpressionType.LIST)
        for item in flat:
            if isinstance(item, Mapping):
                node.push(*(self._expr.alias(alias, source) for alias, source in item.items()))
            else:
                node.push(self.item(item))
        return node

    def item(self, item: Any) -> Any:
        if isinstance(item, Expression):
            return item
        if isinstance(item, SupportsExpression):
            return self._expr.group(item)
        if item == "*":
            return "*"
        return self._expr.identifier(item)


class ConditionBuilder:
    """Builds parenthesized condition groups and chains them into a section."""

    def __init__(self, expr: SqlExpression) -> None:
        self._expr = expr

    def group(self, *conditions: Any) -> SqlExpression:
        """Return ``(c1 AND c2 ...)``.

        Strings are raw SQL, nodes are used as is, statements become
        parenthesized subqueries and ``{column: value}`` mappings expand to
        equality tests (``IN`` for lists, sets and other collections,
        ``IS NULL`` for ``None``).

        Raises:
            InvalidArgumentError: If no condition is given.
        """
        parts: list[Any] = []
        for condition in flatten(conditions):
            if isinstance(condition, Mapping):
                parts.extend(self._from_mapping(condition))
            elif isinstance(condition, Expression):
                parts.append(condition)
            elif isinstance(condition, SupportsExpression):
                parts.append(self._expr.group(condition))
            else:
                parts.append(self._expr.raw(condition))
        if not parts:
            raise InvalidArgumentError("At least one condition is required.", argument="conditions")
        return (
            self._expr.expression(*parts)
            .join(f" {Keyword.AND} ")
            .wrap("(", ")")
            .type(ExpressionType.CONDITION)
        )

    def add(self, section: Expression, connective: Keyword | str, *conditions: Any) -> Expression:
        """Append a condition group to ``section``.

        ``connective`` (``AND`` / ``OR``) is only emitted when the section
        already holds a condition.
        """
        group = self.group(*conditions)
        if not section.is_empty():
            section.push(self._expr.keyword(connective))
        return section.push(group)

    def _from_mapping(self, mapping: Mapping[str, Any]) -> list[SqlExpression]:
        parts = []
        for column, value in mapping.items():
            if value is None:
                parts.append(self._expr.is_null(column))
            elif is_value_collection(value):
                parts.append(self._expr.in_(column, value))
            else:
                parts.append(self._expr.condition(column, "=", value))
        return parts


class AssignmentBuilder:
    """Builds ``"col" = value`` lists for ``SET`` and ``ON DUPLICATE KEY UPDATE``."""

    def __init__(self, expr: SqlExpression) -> None:
        self._expr = expr

    def build(self, assignments: Mapping[str, Any]) -> SqlExpression:
        """Return ``"a" = 1, "b" = 'x'``.

        Raises:
            InvalidArgumentError: If ``assignments`` is empty.
        """
        if not assignments:
            raise InvalidArgumentError("At least one column assignment is required.", argument="assignments")
        return (
            self._expr.expression(
                *(
                    self._expr.expression(self._expr.identifier(column), "=", self.operand(value))
                    for column, value in assignments.items()
                )
            )
            .join(", ")
            .type(ExpressionType.LIST)
        )

    def operand(self, value: Any) -> Any:
        """Nodes are used as is, statements become subqueries, scalars are quoted."""
        if isinstance(value, Expression):
            return value
        if isinstance(value, SupportsExpression):
            return self._expr.group(value)
        return self._expr.value(value)


class JoinBuilder:
    """Builds a single JOIN fragment."""

    def __init__(self, expr: SqlExpression) -> None:
        self._expr = expr
        self._list = AliasableListBuilder(expr)
        self._conditions = ConditionBuilder(expr)

    def on(
        self,
        join_type: Keyword | str,
        table: Any,
        alias: str | None,
        conditions: Iterable[Any],
    ) -> SqlExpression:
        """Return ``<TYPE> <table> [AS alias] ON (<conditions>)``."""
        return self._expr.expression(
            self._join_keyword(join_type),
            self._target(table, alias),
            self._expr.keyword(Keyword.ON),
            self._conditions.group(*conditions),
        ).type(ExpressionType.GROUP)

    def using(
        self,
        join_type: Keyword | str,
        table: Any,
        alias: str | None,
        columns: Iterable[str],
    ) -> SqlExpression:
        """Return ``<TYPE> <table> [AS alias] USING ("a", "b")``.

        Raises:
            InvalidArgumentError: If ``columns`` is empty.
        """
        columns = flatten(columns)
        if not columns:
            raise InvalidArgumentError("JOIN ... USING requires at least one column.", argument="columns")
        return self._expr.expression(
            self._join_keyword(join_type),
            self._target(table, alias),
            self._expr.keyword(Keyword.USING),
            self._expr.identifier_list(columns).wrap("(", ")"),
        ).type(ExpressionType.GROUP)

    def cross(self, table: Any, alias: str | None = None) -> SqlExpression:
        """Return ``CROSS JOIN <table> [AS alias]``."""
        return self._expr.expression(
            self._expr.keyword(Keyword.CROSS_JOIN),
            self._target(table, alias),
        ).type(ExpressionType.GROUP)

    def _target(self, table: Any, alias: str | None) -> SqlExpression:
        if alias:
            return self._list.build({alias: table})
        return self._list.build(table)

    def _join_keyword(self, join_type: Keyword | str) -> SqlExpression:
        normalized = " ".join(str(join_type).upper().split())
        if normalized not in JOIN_TYPES:
            raise InvalidArgumentError(
                f"Invalid join type: '{join_type}'. Allowed: {', '.join(sorted(JOIN_TYPES))}.",
                argument="join_type",
            )
        return self._expr.keyword(normalized)
