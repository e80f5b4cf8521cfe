"""Raw SQL builder."""
from __future__ import annotations

from typing import Any

from sqlbrick.builder.base import SqlBuilder
from sqlbrick.errors import InvalidArgumentError
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.node import Expression, SupportsExpression
from sqlbrick.expression.sql import SqlExpression


class RawBuilder(SqlBuilder):
    """Carries hand-written SQL through the builder API.

    Strings are emitted verbatim and space-joined; nodes and statements are
    rendered in place.  Bindings work as for any other statement, so
    ``raw("SELECT * FROM t WHERE id = :id").bind(id=1)`` is the usual shape.
    """

    def raw(self, *parts: Any) -> RawBuilder:
        if not parts:
            raise InvalidArgumentError("raw() requires at least one SQL fragment.", argument="parts")
        section = self.section(Keyword.RAW)
        for part in parts:
            section.push(part if isinstance(part, (Expression, SupportsExpression)) else self._expr.raw(part))
        return self

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self.pipe_section(Keyword.RAW, required=True, keyword=False, message="RAW requires SQL text."),
        )
