"""UPDATE statement builder."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from sqlbrick.builder.base import FilteringBuilder
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.sql import SqlExpression


class UpdateBuilder(FilteringBuilder):
    """Builds ``UPDATE`` statements.

    Pipeline order::

        WITH, UPDATE, JOIN, SET, FROM, WHERE, ORDER BY, LIMIT, RETURNING

    ``UPDATE`` and ``SET`` are required.
    """

    section_separators: ClassVar[dict[str, str]] = {
        **FilteringBuilder.section_separators,
        str(Keyword.SET): ", ",
        str(Keyword.FROM): ", ",
    }

    def update(self, table: Any) -> UpdateBuilder:
        self.section(Keyword.UPDATE).reset().push(self._list.build(table))
        return self

    table = update

    def set(self, mapping: Mapping[str, Any] | None = None, **values: Any) -> UpdateBuilder:
        """Add ``"col" = value`` assignments; nodes are used as is."""
        self.section(Keyword.SET).push(self._assignments.build({**(mapping or {}), **values}))
        return self

    def from_(self, *tables: Any) -> UpdateBuilder:
        self.section(Keyword.FROM).push(self._list.build(*tables))
        return self

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self.pipe_section(Keyword.WITH),
            self.pipe_section(Keyword.UPDATE, required=True, message="UPDATE requires a target table."),
            self.pipe_section(Keyword.JOIN, keyword=False),
            self.pipe_section(Keyword.SET, required=True, message="UPDATE requires at least one assignment."),
            self.pipe_section(Keyword.FROM),
            self.pipe_section(Keyword.WHERE),
            self.pipe_section(Keyword.ORDER_BY),
            self._pipe_limit(),
            self.pipe_section(Keyword.RETURNING),
        )
