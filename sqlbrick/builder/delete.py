"""DELETE statement builder."""
from __future__ import annotations

from typing import Any, ClassVar

from sqlbrick.builder.base import FilteringBuilder
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.sql import SqlExpression


class DeleteBuilder(FilteringBuilder):
    """Builds ``DELETE`` statements.

    Pipeline order::

        WITH, DELETE, FROM, USING, JOIN, WHERE, ORDER BY, LIMIT, RETURNING

    ``FROM`` is required.
    """

    section_separators: ClassVar[dict[str, str]] = {
        **FilteringBuilder.section_separators,
        str(Keyword.FROM): ", ",
        str(Keyword.USING): ", ",
    }

    def delete(self, table: Any = None) -> DeleteBuilder:
        if table is not None:
            self.from_(table)
        return self

    def from_(self, *tables: Any) -> DeleteBuilder:
        self.section(Keyword.FROM).push(self._list.build(*tables))
        return self

    def using(self, *tables: Any) -> DeleteBuilder:
        """Add PostgreSQL-style ``USING`` tables."""
        self.section(Keyword.USING).push(self._list.build(*tables))
        return self

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self.pipe_section(Keyword.WITH),
            self._expr.keyword(Keyword.DELETE),
            self.pipe_section(Keyword.FROM, required=True, message="DELETE requires a target table."),
            self.pipe_section(Keyword.USING),
            self.pipe_section(Keyword.JOIN, keyword=False),
            self.pipe_section(Keyword.WHERE),
            self.pipe_section(Keyword.ORDER_BY),
            self._pipe_limit(),
            self.pipe_section(Keyword.RETURNING),
        )
