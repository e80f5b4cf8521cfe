"""Statement builder base: the section pipeline.

The Template Method pattern (GoF) is used:
- ``SqlBuilder`` owns the section map, bindings, dialect binding and
  rendering algorithm.
- Each statement builder implements :meth:`SqlBuilder.pipeline`, which pipes
  its sections in a fixed order.

A *section* is a child-less ``SECTION`` node created on first access and
keyed by a clause keyword (``SELECT``, ``WHERE`` ...).  Clause methods push
fragments into sections in any order; :meth:`SqlBuilder.pipe_section` turns a
section into ``<KEYWORD> <body>`` (or nothing, when empty and optional) at
render time.  Required sections that are still empty raise
:class:`~sqlbrick.errors.MissingSectionError`.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, TypeVar

from sqlbrick.builder.bindings import BindingMap
from sqlbrick.builder.clauses import (
    AliasableListBuilder,
    AssignmentBuilder,
    ConditionBuilder,
    JoinBuilder,
)
from sqlbrick.dialect.base import Feature, SQLDialect
from sqlbrick.errors import ConfigurationError, InvalidArgumentError, MissingSectionError
from sqlbrick.expression.keywords import ORDER_DIRECTIONS, Keyword
from sqlbrick.expression.node import Expression, ExpressionType, SupportsExpression
from sqlbrick.expression.sql import SqlExpression

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="SqlBuilder")


@dataclass
class CompiledSQL:
    """The output of a rendered statement.

    Attributes:
        sql: The SQL text.  Literal values are inlined; named placeholders
            created with ``expr.param(...)`` refer to ``params``.
        params: A copy of the statement bindings.
        dialect: The dialect name the SQL was rendered for.
    """

    sql: str
    params: dict[str, Any]
    dialect: str

    def merge_params(self, runtime: Mapping[str, Any]) -> dict[str, Any]:
        """Return the bindings merged with caller-supplied ``runtime`` values.

        Runtime values win on name clashes.
        """
        return {**self.params, **runtime}


class BuilderState(str, Enum):
    """Lifecycle of a statement builder."""

    BUILDING = "building"
    RENDERED = "rendered"


class SqlBuilder(ABC):
    """Abstract statement builder.

    Args:
        expression: The vocabulary prototype every node of the statement is
            spawned from.  It fixes the dialect and optional quoter.
        strict_features: When ``True`` (default), clause methods that need an
            optional dialect feature raise
            :class:`~sqlbrick.errors.UnsupportedFeatureError` if the dialect
            lacks it.

    Raises:
        ConfigurationError: If ``expression`` is not a :class:`SqlExpression`.
    """

    #: Separator per section key; sections not listed join with a space.
    section_separators: ClassVar[dict[str, str]] = {
        str(Keyword.WITH): ", ",
        str(Keyword.RETURNING): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        if not isinstance(expression, SqlExpression):
            raise ConfigurationError(
                f"{self.__class__.__name__} requires a SqlExpression prototype, "
                f"got {type(expression).__name__}."
            )
        self._expr = expression.prototype()
        self._strict_features = strict_features
        self._sections: dict[str, SqlExpression] = {}
        self._bindings = BindingMap()
        self._state = BuilderState.BUILDING
        self._list = AliasableListBuilder(self._expr)
        self._conditions = ConditionBuilder(self._expr)
        self._assignments = AssignmentBuilder(self._expr)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def expr(self) -> SqlExpression:
        """The vocabulary prototype, e.g. ``builder.expr.condition(...)``."""
        return self._expr

    @property
    def dialect(self) -> SQLDialect:
        return self._expr.dialect

    @property
    def strict_features(self) -> bool:
        return self._strict_features

    @property
    def state(self) -> BuilderState:
        return self._state

    def set_dialect(self: B, dialect: SQLDialect) -> B:
        """Rebind the prototype and every section to ``dialect``."""
        self._expr.set_dialect(dialect)
        for section in self._sections.values():
            section.set_dialect(dialect)
        self._touch()
        return self

    def prototype(self: B) -> B:
        """Return a fresh, empty builder of the same class and settings."""
        return self.__class__(self._expr, strict_features=self._strict_features)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def section(self, key: Keyword | str) -> SqlExpression:
        """Return the section for ``key``, creating it on first access."""
        key = str(key)
        self._touch()
        section = self._sections.get(key)
        if section is None:
            section = (
                self._expr.expression()
                .join(self.section_separators.get(key, " "))
                .type(ExpressionType.SECTION)
            )
            self._sections[key] = section
        return section

    def has_section(self, key: Keyword | str) -> bool:
        section = self._sections.get(str(key))
        return section is not None and not section.is_empty()

    def pipe_section(
        self,
        key: Keyword | str,
        *,
        required: bool = False,
        keyword: bool | str = True,
        message: str | None = None,
    ) -> SqlExpression:
        """Return ``<KEYWORD> <section>`` as a ``PIPE`` node.

        Args:
            key: Section key.
            required: Raise when the section is empty.
            keyword: ``True`` prefixes ``key``; a string prefixes that
                keyword instead; ``False`` emits the body alone.
            message: Error message override for a missing section.

        Raises:
            MissingSectionError: If ``required`` and the section is empty.
        """
        key = str(key)
        pipe = self._expr.expression().type(ExpressionType.PIPE)
        section = self._sections.get(key)
        if section is None or section.is_empty():
            if required:
                raise MissingSectionError(
                    message or f"{self.__class__.__name__} requires a {key} section.",
                    section=key,
                )
            return pipe
        if keyword is True:
            pipe.push(self._expr.keyword(key))
        elif keyword:
            pipe.push(self._expr.keyword(keyword))
        return pipe.push(section)

    @abstractmethod
    def pipeline(self) -> SqlExpression:
        """Return the statement as a space-joined node of piped sections."""

    def _pipe(self, *sections: Any) -> SqlExpression:
        return self._expr.expression(*sections).type(ExpressionType.PIPE)

    def reset(self: B, section: Keyword | str | None = None) -> B:
        """Clear one section, or every section plus the bindings."""
        if section is None:
            self._sections.clear()
            self._bindings.clear()
            self._reset_state()
        else:
            self._sections.pop(str(section), None)
        logger.debug("Reset %s section=%s", self.__class__.__name__, section or "*")
        self._touch()
        return self

    def _reset_state(self) -> None:
        """Hook for builders that keep clause state outside the section map."""

    def _touch(self) -> None:
        self._state = BuilderState.BUILDING

    def _require(self, feature: Feature) -> None:
        if self._strict_features:
            self.dialect.require(feature)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def as_expression(self) -> SqlExpression:
        return self.pipeline()

    def render(self) -> str:
        sql = self.pipeline().render()
        self._state = BuilderState.RENDERED
        logger.debug(
            "Rendered %s for %s (%d chars)", self.__class__.__name__, self.dialect.name, len(sql)
        )
        return sql

    def build(self) -> CompiledSQL:
        """Render the statement and pair it with a copy of its bindings."""
        return CompiledSQL(sql=self.render(), params=self._bindings.as_dict(), dialect=self.dialect.name)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.dialect.name} {self._state.value}>"

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def bind(self: B, mapping: Mapping[str, Any] | None = None, **values: Any) -> B:
        """Add named parameter values (see :class:`BindingMap`)."""
        self._bindings.bind(mapping, **values)
        self._touch()
        return self

    @property
    def bindings(self) -> dict[str, Any]:
        return self._bindings.as_dict()

    def binding(self, name: str, default: Any = None) -> Any:
        return self._bindings.get(name, default)

    def has_binding(self, name: str) -> bool:
        return name in self._bindings

    def has_bindings(self) -> bool:
        return bool(self._bindings)

    def remove_binding(self: B, name: str) -> B:
        self._bindings.remove(name)
        self._touch()
        return self

    def clear_bindings(self: B) -> B:
        self._bindings.clear()
        self._touch()
        return self

    # ------------------------------------------------------------------
    # Shared clauses
    # ------------------------------------------------------------------

    def with_(self: B, name: str, query: Any) -> B:
        """Add a common table expression ``"name" AS (query)``."""
        self._require(Feature.CTE)
        if not isinstance(query, (Expression, SupportsExpression)):
            query = self._expr.raw(query)
        self.section(Keyword.WITH).push(
            self._expr.expression(
                self._expr.identifier(name),
                self._expr.keyword(Keyword.AS),
                self._expr.group(query),
            )
        )
        return self

    def returning(self: B, *columns: Any) -> B:
        """Add columns to the ``RETURNING`` clause."""
        self._require(Feature.RETURNING)
        self.section(Keyword.RETURNING).push(self._list.build(*columns))
        return self


class FilteringBuilder(SqlBuilder):
    """Statement builder with WHERE, JOIN, ORDER BY and LIMIT clauses.

    Shared by the SELECT, UPDATE and DELETE builders.
    """

    section_separators: ClassVar[dict[str, str]] = {
        **SqlBuilder.section_separators,
        str(Keyword.ORDER_BY): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._joins = JoinBuilder(self._expr)
        self._limit: int | None = None
        self._offset: int | None = None

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self: B, *conditions: Any) -> B:
        """AND a condition group into ``WHERE``."""
        self._conditions.add(self.section(Keyword.WHERE), Keyword.AND, *conditions)
        return self

    def or_where(self: B, *conditions: Any) -> B:
        """OR a condition group into ``WHERE``."""
        self._conditions.add(self.section(Keyword.WHERE), Keyword.OR, *conditions)
        return self

    def where_in(self: B, column: Any, values: Any) -> B:
        return self.where(self._expr.in_(column, values))

    def where_like(self: B, column: Any, value: Any) -> B:
        return self.where(self._expr.like(column, value))

    def where_between(self: B, column: Any, low: Any, high: Any) -> B:
        return self.where(self._expr.between(column, low, high))

    def where_null(self: B, column: Any) -> B:
        return self.where(self._expr.is_null(column))

    def where_not_null(self: B, column: Any) -> B:
        return self.where(self._expr.is_not_null(column))

    def where_case(self: B, condition: Any, then: Any, else_: Any = None) -> B:
        return self.where(self._expr.case(condition, then, else_))

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def join(self: B, table: Any, *conditions: Any, alias: str | None = None) -> B:
        """Add ``INNER JOIN <table> [AS alias] ON (<conditions>)``."""
        return self._add_join(Keyword.INNER_JOIN, table, alias, conditions)

    inner_join = join

    def left_join(self: B, table: Any, *conditions: Any, alias: str | None = None) -> B:
        return self._add_join(Keyword.LEFT_JOIN, table, alias, conditions)

    def right_join(self: B, table: Any, *conditions: Any, alias: str | None = None) -> B:
        return self._add_join(Keyword.RIGHT_JOIN, table, alias, conditions)

    def cross_join(self: B, table: Any, alias: str | None = None) -> B:
        self.section(Keyword.JOIN).push(self._joins.cross(table, alias))
        return self

    def join_using(
        self: B,
        table: Any,
        *columns: str,
        alias: str | None = None,
        join_type: Keyword | str = Keyword.INNER_JOIN,
    ) -> B:
        """Add ``<TYPE> <table> [AS alias] USING (<columns>)``."""
        self.section(Keyword.JOIN).push(self._joins.using(join_type, table, alias, columns))
        return self

    def _add_join(self: B, join_type: Keyword, table: Any, alias: str | None, conditions: Any) -> B:
        self.section(Keyword.JOIN).push(self._joins.on(join_type, table, alias, conditions))
        return self

    # ------------------------------------------------------------------
    # ORDER BY / LIMIT
    # ------------------------------------------------------------------

    def order_by(self: B, *columns: Any) -> B:
        """Add ORDER BY terms.

        Args:
            *columns: Names, nodes, or ``{column: direction}`` mappings where
                direction is ``ASC``, ``DESC``, ``NULLS FIRST`` or
                ``NULLS LAST``.

        Raises:
            InvalidArgumentError: On an empty call or an unknown direction.
        """
        if not columns:
            raise InvalidArgumentError("order_by() requires at least one column.", argument="columns")
        section = self.section(Keyword.ORDER_BY)
        for column in columns:
            if isinstance(column, Mapping):
                for name, direction in column.items():
                    section.push(self._order_term(name, direction))
            else:
                section.push(self._list.build(column))
        return self

    def _order_term(self, column: Any, direction: str) -> SqlExpression:
        normalized = " ".join(str(direction).upper().split())
        if normalized not in ORDER_DIRECTIONS:
            raise InvalidArgumentError(
                f"Invalid order direction: '{direction}'. Allowed: {', '.join(sorted(ORDER_DIRECTIONS))}.",
                argument="direction",
            )
        return self._expr.expression(self._list.item(column), self._expr.keyword(normalized))

    def limit(self: B, limit: int, offset: int | None = None) -> B:
        """Set ``LIMIT`` (and optionally ``OFFSET``); rendered by the dialect."""
        self._limit = _non_negative(limit, "limit")
        if offset is not None:
            self._offset = _non_negative(offset, "offset")
        self._touch()
        return self

    def offset(self: B, offset: int) -> B:
        self._offset = _non_negative(offset, "offset")
        self._touch()
        return self

    def _pipe_limit(self) -> SqlExpression:
        pipe = self._expr.expression().type(ExpressionType.PIPE)
        if self._limit is None:
            if self._offset is not None:
                raise MissingSectionError("OFFSET requires a LIMIT.", section=str(Keyword.LIMIT))
            return pipe
        return pipe.push(self._expr.raw(self.dialect.limit_clause(self._limit, self._offset)))

    def _reset_state(self) -> None:
        self._limit = None
        self._offset = None

    def reset(self: B, section: Keyword | str | None = None) -> B:
        if section is not None and str(section) == str(Keyword.LIMIT):
            self._limit = None
            self._offset = None
        elif section is not None and str(section) == str(Keyword.OFFSET):
            self._offset = None
        return super().reset(section)


def _non_negative(value: Any, argument: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{argument} must be a non-negative integer, got {value!r}.", argument=argument)
    return value
