"""SELECT statement builder."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar

from sqlbrick.builder.base import FilteringBuilder
from sqlbrick.dialect.base import Feature
from sqlbrick.errors import InvalidArgumentError
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.node import Expression, SupportsExpression
from sqlbrick.expression.sql import SqlExpression


class SelectBuilder(FilteringBuilder):
    """Builds ``SELECT`` statements.

    Pipeline order::

        COMMENT, DESCRIBE, EXPLAIN, WITH, SELECT [DISTINCT], FROM, JOIN,
        WHERE, GROUP BY, HAVING, WINDOW, UNION, ORDER BY, LIMIT, LOCK

    Only ``SELECT`` is required.  ``WINDOW`` and ``UNION`` come before
    ``ORDER BY`` and ``LIMIT``, so ordering and limiting apply to the whole
    compound result rather than to the last member of a ``UNION``.

    Example::

        sql = (
            dml.select("id", {"total": dml.expression().count()})
            .from_("orders")
            .where({"status": "paid"})
            .group_by("id")
            .order_by({"total": "desc"})
            .limit(10)
            .render()
        )
    """

    section_separators: ClassVar[dict[str, str]] = {
        **FilteringBuilder.section_separators,
        str(Keyword.SELECT): ", ",
        str(Keyword.FROM): ", ",
        str(Keyword.GROUP_BY): ", ",
        str(Keyword.WINDOW): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._distinct = False

    # ------------------------------------------------------------------
    # Clauses
    # ------------------------------------------------------------------

    def select(self, *columns: Any) -> SelectBuilder:
        """Add columns; ``{alias: source}`` mappings become ``source AS alias``."""
        self.section(Keyword.SELECT).push(self._list.build(*columns))
        return self

    columns = select

    def distinct(self, enabled: bool = True) -> SelectBuilder:
        self._distinct = enabled
        self._touch()
        return self

    def from_(self, *tables: Any) -> SelectBuilder:
        self.section(Keyword.FROM).push(self._list.build(*tables))
        return self

    def group_by(self, *columns: Any) -> SelectBuilder:
        self.section(Keyword.GROUP_BY).push(self._list.build(*columns))
        return self

    def having(self, *conditions: Any) -> SelectBuilder:
        self._conditions.add(self.section(Keyword.HAVING), Keyword.AND, *conditions)
        return self

    def or_having(self, *conditions: Any) -> SelectBuilder:
        self._conditions.add(self.section(Keyword.HAVING), Keyword.OR, *conditions)
        return self

    def having_in(self, column: Any, values: Any) -> SelectBuilder:
        return self.having(self._expr.in_(column, values))

    def having_like(self, column: Any, value: Any) -> SelectBuilder:
        return self.having(self._expr.like(column, value))

    def window(
        self,
        name: str,
        partition_by: str | Sequence[str] | None = None,
        order_by: str | Sequence[str] | None = None,
    ) -> SelectBuilder:
        """Add a named window ``"name" AS (PARTITION BY ... ORDER BY ...)``."""
        self._require(Feature.WINDOW_FUNCTIONS)
        self.section(Keyword.WINDOW).push(
            self._expr.expression(
                self._expr.identifier(name),
                self._expr.keyword(Keyword.AS),
                self._expr.window_spec(partition_by, order_by),
            )
        )
        return self

    def union(self, query: Any) -> SelectBuilder:
        return self._add_union(Keyword.UNION, query)

    def union_all(self, query: Any) -> SelectBuilder:
        return self._add_union(Keyword.UNION_ALL, query)

    def _add_union(self, keyword: Keyword, query: Any) -> SelectBuilder:
        if not isinstance(query, (Expression, SupportsExpression)):
            raise InvalidArgumentError(
                f"{keyword} requires a statement or expression, got {type(query).__name__}.",
                argument="query",
            )
        self.section(Keyword.UNION).push(self._expr.keyword(keyword), query)
        return self

    def explain(self) -> SelectBuilder:
        self.section(Keyword.EXPLAIN).reset().push(self._expr.keyword(Keyword.EXPLAIN))
        return self

    def describe(self) -> SelectBuilder:
        self.section(Keyword.DESCRIBE).reset().push(self._expr.keyword(Keyword.DESCRIBE))
        return self

    def comment(self, text: str) -> SelectBuilder:
        """Prefix the statement with a ``/* text */`` comment."""
        body = str(text).replace("*/", "* /")
        self.section("COMMENT").push(self._expr.raw(f"/* {body} */"))
        return self

    def lock_for_update(self) -> SelectBuilder:
        self.section(Keyword.LOCK).reset().push(self._expr.keyword(Keyword.FOR_UPDATE))
        return self

    def lock_in_share_mode(self) -> SelectBuilder:
        self.section(Keyword.LOCK).reset().push(self._expr.keyword(Keyword.LOCK_IN_SHARE_MODE))
        return self

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        super()._reset_state()
        self._distinct = False

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self.pipe_section("COMMENT", keyword=False),
            self.pipe_section(Keyword.DESCRIBE, keyword=False),
            self.pipe_section(Keyword.EXPLAIN, keyword=False),
            self.pipe_section(Keyword.WITH),
            self._expr.keyword(Keyword.SELECT),
            self._expr.keyword(Keyword.DISTINCT) if self._distinct else None,
            self.pipe_section(
                Keyword.SELECT,
                required=True,
                keyword=False,
                message="SELECT requires at least one column.",
            ),
            self.pipe_section(Keyword.FROM),
            self.pipe_section(Keyword.JOIN, keyword=False),
            self.pipe_section(Keyword.WHERE),
            self.pipe_section(Keyword.GROUP_BY),
            self.pipe_section(Keyword.HAVING),
            self.pipe_section(Keyword.WINDOW),
            self.pipe_section(Keyword.UNION, keyword=False),
            self.pipe_section(Keyword.ORDER_BY),
            self._pipe_limit(),
            self.pipe_section(Keyword.LOCK, keyword=False),
        )
