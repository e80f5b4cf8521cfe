"""INSERT statement builder."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from sqlbrick.builder.base import SqlBuilder
from sqlbrick.dialect.base import Feature
from sqlbrick.errors import InvalidArgumentError, MissingSectionError
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.node import Expression, SupportsExpression
from sqlbrick.expression.sql import SqlExpression


class InsertBuilder(SqlBuilder):
    """Builds ``INSERT`` statements.

    Pipeline order::

        INSERT, IGNORE, INTO, (columns), VALUES | SELECT,
        ON DUPLICATE KEY UPDATE, RETURNING

    ``INTO`` and one of ``VALUES`` / ``SELECT`` are required.  Setting one
    source clears the other.
    """

    section_separators: ClassVar[dict[str, str]] = {
        **SqlBuilder.section_separators,
        str(Keyword.VALUES): ", ",
        str(Keyword.ON_DUPLICATE): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._ignore = False
        self._columns: list[str] | None = None

    def insert(self, table: Any = None) -> InsertBuilder:
        if table is not None:
            self.into(table)
        return self

    def into(self, table: Any) -> InsertBuilder:
        self.section(Keyword.INTO).reset().push(self._list.build(table))
        return self

    def ignore(self, enabled: bool = True) -> InsertBuilder:
        if enabled:
            self._require(Feature.INSERT_IGNORE)
        self._ignore = enabled
        self._touch()
        return self

    def columns(self, *columns: str) -> InsertBuilder:
        """Set the target column list.

        Raises:
            InvalidArgumentError: If no column is given, or if rows were
                already added for a different column count.
        """
        names = [str(column) for column in columns]
        if not names:
            raise InvalidArgumentError("columns() requires at least one column.", argument="columns")
        width = self._row_width()
        if width is not None and len(names) != width:
            raise InvalidArgumentError(
                f"Expected {width} columns to match existing rows, got {len(names)}.",
                argument="columns",
            )
        self._columns = names
        self.section(Keyword.COLUMNS).reset().push(self._expr.identifier_list(names).wrap("(", ")"))
        return self

    def values(self, *rows: Mapping[str, Any] | Sequence[Any]) -> InsertBuilder:
        """Append rows to ``VALUES``.

        Mapping rows fix the column list from their keys, and every mapping
        row must have the same keys.  Sequence rows must match the column
        count.  The whole batch is checked before anything is added, so a
        rejected call leaves the builder unchanged.

        Raises:
            InvalidArgumentError: On an empty call, mismatched keys or a
                wrong row length.
        """
        if not rows:
            raise InvalidArgumentError("values() requires at least one row.", argument="rows")
        columns = self._columns
        width = len(columns) if columns is not None else self._row_width()
        prepared: list[list[Any]] = []
        for row in rows:
            if isinstance(row, Mapping) and columns is None:
                columns = [str(key) for key in row]
            prepared.append(self._prepare_row(row, columns, width))
            width = len(prepared[-1])
        if self._columns is None and columns is not None:
            self.columns(*columns)
        self.reset(Keyword.SELECT)
        section = self.section(Keyword.VALUES)
        for row in prepared:
            section.push(
                self._expr.expression(*(self._assignments.operand(value) for value in row))
                .join(", ")
                .wrap("(", ")")
            )
        return self

    @staticmethod
    def _prepare_row(
        row: Mapping[str, Any] | Sequence[Any], columns: list[str] | None, width: int | None
    ) -> list[Any]:
        if isinstance(row, Mapping):
            keys = [str(key) for key in row]
            if not keys:
                raise InvalidArgumentError("A row must contain at least one column.", argument="rows")
            if columns is None or set(keys) != set(columns):
                raise InvalidArgumentError(
                    f"Row keys {sorted(keys)} do not match columns {sorted(columns or [])}.",
                    argument="rows",
                )
            if width is not None and len(columns) != width:
                raise InvalidArgumentError(
                    f"Expected {width} values per row, got {len(columns)}.", argument="rows"
                )
            return [row[column] for column in columns]
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise InvalidArgumentError(
                f"A row must be a mapping or a sequence, got {type(row).__name__}.", argument="rows"
            )
        if width is not None and len(row) != width:
            raise InvalidArgumentError(f"Expected {width} values per row, got {len(row)}.", argument="rows")
        if not row:
            raise InvalidArgumentError("A row must contain at least one value.", argument="rows")
        return list(row)

    def _row_width(self) -> int | None:
        if not self.has_section(Keyword.VALUES):
            return None
        first = self.section(Keyword.VALUES).children[0]
        return len(first.children)

    def from_select(self, query: Any) -> InsertBuilder:
        """Use ``query`` (a statement, node or raw SQL) as the row source."""
        if not isinstance(query, (Expression, SupportsExpression)):
            query = self._expr.raw(query)
        self.reset(Keyword.VALUES)
        self.section(Keyword.SELECT).reset().push(query)
        return self

    def on_duplicate_key_update(self, mapping: Mapping[str, Any] | None = None, **values: Any) -> InsertBuilder:
        """Add ``ON DUPLICATE KEY UPDATE "col" = value, ...``."""
        self._require(Feature.ON_DUPLICATE_KEY_UPDATE)
        self.section(Keyword.ON_DUPLICATE).push(self._assignments.build({**(mapping or {}), **values}))
        return self

    def _reset_state(self) -> None:
        self._ignore = False
        self._columns = None

    def reset(self, section: Keyword | str | None = None) -> InsertBuilder:
        if section is not None and str(section) == str(Keyword.COLUMNS):
            self._columns = None
        return super().reset(section)

    def pipeline(self) -> SqlExpression:
        if not (self.has_section(Keyword.VALUES) or self.has_section(Keyword.SELECT)):
            raise MissingSectionError("INSERT requires VALUES or a SELECT source.", section=str(Keyword.VALUES))
        return self._pipe(
            self._expr.keyword(Keyword.INSERT),
            self._expr.keyword(Keyword.IGNORE) if self._ignore else None,
            self.pipe_section(Keyword.INTO, required=True, message="INSERT requires a target table."),
            self.pipe_section(Keyword.COLUMNS, keyword=False),
            self.pipe_section(Keyword.VALUES),
            self.pipe_section(Keyword.SELECT, keyword=False),
            self.pipe_section(Keyword.ON_DUPLICATE),
            self.pipe_section(Keyword.RETURNING),
        )
