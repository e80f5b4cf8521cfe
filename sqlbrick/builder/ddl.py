"""DDL statement builders: CREATE / ALTER / DROP / TRUNCATE TABLE.

They share the section pipeline of :class:`~sqlbrick.builder.base.SqlBuilder`,
so identifiers and defaults are quoted by the bound dialect and optional
syntax (``IF NOT EXISTS``, inline ``INDEX``, ``MODIFY COLUMN`` ...) is checked
against its feature flags.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar

from sqlbrick.builder.base import SqlBuilder
from sqlbrick.dialect.base import Feature
from sqlbrick.errors import InvalidArgumentError, UnsupportedFeatureError
from sqlbrick.expression.keywords import REFERENTIAL_ACTIONS, Keyword
from sqlbrick.expression.node import ExpressionType
from sqlbrick.expression.sql import SqlExpression


class _NoDefault:
    """Marker for "no DEFAULT clause"; ``None`` means ``DEFAULT NULL``."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()

_BARE_OPTION = re.compile(r"\w+")

#: Constraint kinds accepted by ``AlterTableBuilder.add_constraint``.
CONSTRAINT_KINDS: frozenset[str] = frozenset({Keyword.PRIMARY_KEY.value, Keyword.UNIQUE.value})


def _names(columns: str | Sequence[str]) -> list[str]:
    if isinstance(columns, str):
        return [columns]
    return [str(column) for column in columns]


class ColumnDefinitionBuilder:
    """Builds ``"name" TYPE [modifiers] [NOT NULL] [DEFAULT v]``."""

    def __init__(self, expr: SqlExpression, require: Callable[[Feature], None]) -> None:
        self._expr = expr
        self._require = require

    def build(
        self,
        name: str,
        type_: str,
        modifiers: Sequence[str] = (),
        nullable: bool = True,
        default: Any = NO_DEFAULT,
    ) -> SqlExpression:
        if not type_ or not str(type_).strip():
            raise InvalidArgumentError(f"Column '{name}' requires a type.", argument="type_")
        definition = self._expr.expression(self._expr.identifier(name), self._expr.raw(str(type_)))
        for modifier in modifiers:
            normalized = " ".join(str(modifier).upper().split())
            if normalized == "AUTO_INCREMENT":
                self._require(Feature.AUTO_INCREMENT)
            definition.push(self._expr.raw(normalized))
        if not nullable:
            definition.push(self._expr.keyword(Keyword.NOT_NULL))
        if default is not NO_DEFAULT:
            definition.push(self._expr.keyword(Keyword.DEFAULT), self._expr.value(default))
        return definition


class CreateTableBuilder(SqlBuilder):
    """Builds ``CREATE TABLE [IF NOT EXISTS] "t" (<definitions>) [options]``.

    Column definitions render first, then the primary key, then the
    remaining constraints and indexes in call order.
    """

    section_separators: ClassVar[dict[str, str]] = {
        **SqlBuilder.section_separators,
        str(Keyword.COLUMN): ", ",
        str(Keyword.CONSTRAINT): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._columns = ColumnDefinitionBuilder(self._expr, self._require)
        self._if_not_exists = False

    def create_table(self, table: str) -> CreateTableBuilder:
        self.section(Keyword.TABLE).reset().push(self._expr.identifier(table))
        return self

    def if_not_exists(self) -> CreateTableBuilder:
        self._require(Feature.IF_NOT_EXISTS)
        self._if_not_exists = True
        self._touch()
        return self

    def add_column(
        self,
        name: str,
        type_: str,
        *modifiers: str,
        nullable: bool = True,
        default: Any = NO_DEFAULT,
    ) -> CreateTableBuilder:
        """Add a column definition.

        Args:
            name: Column name.
            type_: SQL type, e.g. ``"VARCHAR(255)"``; emitted verbatim.
            *modifiers: Extra raw modifiers (``"AUTO_INCREMENT"``, ``"UNIQUE"``).
            nullable: ``False`` adds ``NOT NULL``.
            default: Literal default; ``None`` renders ``DEFAULT NULL``.
        """
        self.section(Keyword.COLUMN).push(self._columns.build(name, type_, modifiers, nullable, default))
        return self

    def primary_key(self, *columns: str) -> CreateTableBuilder:
        """Set the table primary key; a later call replaces an earlier one."""
        names = self._require_columns(columns)
        self.section(Keyword.PRIMARY_KEY).reset().push(
            self._expr.keyword(Keyword.PRIMARY_KEY),
            self._expr.identifier_list(names).wrap("(", ")"),
        )
        return self

    def unique(self, *columns: str, name: str | None = None) -> CreateTableBuilder:
        names = self._require_columns(columns)
        self.section(Keyword.CONSTRAINT).push(
            self._expr.expression(
                self._constraint_name(name),
                self._expr.keyword(Keyword.UNIQUE),
                self._expr.identifier_list(names).wrap("(", ")"),
            )
        )
        return self

    def foreign_key(
        self,
        columns: str | Sequence[str],
        table: str,
        references: str | Sequence[str],
        on_delete: str | None = None,
        on_update: str | None = None,
        name: str | None = None,
    ) -> CreateTableBuilder:
        """Add ``FOREIGN KEY (...) REFERENCES "t" (...) [ON DELETE ..] [ON UPDATE ..]``.

        Raises:
            InvalidArgumentError: If the column lists are empty or differ in
                length, or a referential action is unknown.
        """
        local = _names(columns)
        remote = _names(references)
        if not local or len(local) != len(remote):
            raise InvalidArgumentError(
                "FOREIGN KEY requires matching, non-empty column lists.", argument="references"
            )
        constraint = self._expr.expression(
            self._constraint_name(name),
            self._expr.keyword(Keyword.FOREIGN_KEY),
            self._expr.identifier_list(local).wrap("(", ")"),
            self._expr.keyword(Keyword.REFERENCES),
            self._expr.identifier(table),
            self._expr.identifier_list(remote).wrap("(", ")"),
        )
        for clause, action in ((Keyword.ON_DELETE, on_delete), (Keyword.ON_UPDATE, on_update)):
            if action is not None:
                constraint.push(self._expr.keyword(clause), self._expr.keyword(_referential_action(action)))
        self.section(Keyword.CONSTRAINT).push(constraint)
        return self

    def index(self, *columns: str, name: str | None = None) -> CreateTableBuilder:
        """Add an inline ``INDEX "name" (...)``; the name defaults to ``idx_<cols>``."""
        self._require(Feature.INLINE_INDEX)
        names = self._require_columns(columns)
        self.section(Keyword.CONSTRAINT).push(
            self._expr.expression(
                self._expr.keyword(Keyword.INDEX),
                self._expr.identifier(name or "idx_" + "_".join(names)),
                self._expr.identifier_list(names).wrap("(", ")"),
            )
        )
        return self

    def options(self, mapping: Mapping[str, Any] | None = None, **options: Any) -> CreateTableBuilder:
        """Add table options rendered as ``KEY=value`` after the definitions.

        Bare words such as ``InnoDB`` or ``utf8mb4`` stay unquoted; any other
        string is rendered as a quoted literal, numbers raw.
        """
        section = self.section("OPTIONS")
        for key, value in {**(mapping or {}), **options}.items():
            if isinstance(value, str) and _BARE_OPTION.fullmatch(value):
                rendered = self._expr.raw(value)
            else:
                rendered = self._expr.value(value)
            section.push(self._expr.expression(f"{str(key).upper()}=", rendered).join(""))
        return self

    def _constraint_name(self, name: str | None) -> SqlExpression | None:
        if not name:
            return None
        return self._expr.expression(self._expr.keyword(Keyword.CONSTRAINT), self._expr.identifier(name))

    def _require_columns(self, columns: Sequence[str]) -> list[str]:
        names = [str(column) for column in columns]
        if not names:
            raise InvalidArgumentError("At least one column is required.", argument="columns")
        return names

    def _reset_state(self) -> None:
        self._if_not_exists = False

    def pipeline(self) -> SqlExpression:
        definitions = (
            self._expr.expression(
                self.pipe_section(Keyword.COLUMN, required=True, keyword=False,
                                  message="CREATE TABLE requires at least one column."),
                self.pipe_section(Keyword.PRIMARY_KEY, keyword=False),
                self.pipe_section(Keyword.CONSTRAINT, keyword=False),
            )
            .join(", ")
            .wrap("(", ")")
            .type(ExpressionType.GROUP)
        )
        return self._pipe(
            self._expr.keyword(Keyword.CREATE),
            self._expr.keyword(Keyword.TABLE),
            self._expr.keyword(self.dialect.if_not_exists_clause()) if self._if_not_exists else None,
            self.pipe_section(Keyword.TABLE, required=True, keyword=False,
                              message="CREATE TABLE requires a table name."),
            definitions,
            self.pipe_section("OPTIONS", keyword=False),
        )


class AlterTableBuilder(SqlBuilder):
    """Builds ``ALTER TABLE "t" <action>, <action> ...``."""

    section_separators: ClassVar[dict[str, str]] = {
        **SqlBuilder.section_separators,
        str(Keyword.ALTER): ", ",
    }

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._columns = ColumnDefinitionBuilder(self._expr, self._require)

    def alter_table(self, table: str) -> AlterTableBuilder:
        self.section(Keyword.TABLE).reset().push(self._expr.identifier(table))
        return self

    def add_column(
        self,
        name: str,
        type_: str,
        *modifiers: str,
        nullable: bool = True,
        default: Any = NO_DEFAULT,
    ) -> AlterTableBuilder:
        return self._action(
            self._expr.keyword(Keyword.ADD),
            self._expr.keyword(Keyword.COLUMN),
            self._columns.build(name, type_, modifiers, nullable, default),
        )

    def modify_column(
        self,
        name: str,
        type_: str,
        *modifiers: str,
        nullable: bool = True,
        default: Any = NO_DEFAULT,
    ) -> AlterTableBuilder:
        """Change a column definition.

        Dialects with ``modify_column`` get ``MODIFY COLUMN <definition>``.
        Dialects with ``alter_column_type`` get ``ALTER COLUMN "c" TYPE t``,
        followed by ``SET NOT NULL`` or ``DROP NOT NULL`` (so ``nullable``
        means the same on every backend) and ``SET DEFAULT`` when given.

        Raises:
            UnsupportedFeatureError: If the dialect has neither feature.
        """
        dialect = self.dialect
        if dialect.supports(Feature.MODIFY_COLUMN):
            return self._action(
                self._expr.keyword(Keyword.MODIFY_COLUMN),
                self._columns.build(name, type_, modifiers, nullable, default),
            )
        if not dialect.supports(Feature.ALTER_COLUMN_TYPE):
            raise UnsupportedFeatureError(Feature.MODIFY_COLUMN.value, dialect.name)
        column = self._expr.identifier(name)
        self._action(
            self._expr.keyword(Keyword.ALTER_COLUMN),
            column,
            self._expr.keyword(Keyword.TYPE),
            self._expr.raw(" ".join([str(type_), *(str(m).upper() for m in modifiers)])),
        )
        self._action(
            self._expr.keyword(Keyword.ALTER_COLUMN), column,
            self._expr.keyword(Keyword.DROP if nullable else Keyword.SET),
            self._expr.keyword(Keyword.NOT_NULL),
        )
        if default is not NO_DEFAULT:
            self._action(
                self._expr.keyword(Keyword.ALTER_COLUMN), column,
                self._expr.keyword(Keyword.SET_DEFAULT), self._expr.value(default),
            )
        return self

    def drop_column(self, name: str) -> AlterTableBuilder:
        return self._action(
            self._expr.keyword(Keyword.DROP),
            self._expr.keyword(Keyword.COLUMN),
            self._expr.identifier(name),
        )

    def rename_column(self, old: str, new: str) -> AlterTableBuilder:
        return self._action(
            self._expr.keyword(Keyword.RENAME_COLUMN),
            self._expr.identifier(old),
            self._expr.keyword(Keyword.TO),
            self._expr.identifier(new),
        )

    def add_constraint(self, kind: str, *columns: str, name: str | None = None) -> AlterTableBuilder:
        """Add ``ADD [CONSTRAINT "name"] PRIMARY KEY | UNIQUE (...)``."""
        normalized = " ".join(str(kind).upper().split())
        if normalized not in CONSTRAINT_KINDS:
            raise InvalidArgumentError(
                f"Invalid constraint kind: '{kind}'. Allowed: {', '.join(sorted(CONSTRAINT_KINDS))}.",
                argument="kind",
            )
        if not columns:
            raise InvalidArgumentError("A constraint requires at least one column.", argument="columns")
        return self._action(
            self._expr.keyword(Keyword.ADD),
            self._expr.expression(self._expr.keyword(Keyword.CONSTRAINT), self._expr.identifier(name))
            if name else None,
            self._expr.keyword(normalized),
            self._expr.identifier_list(list(columns)).wrap("(", ")"),
        )

    def drop_constraint(self, name: str) -> AlterTableBuilder:
        return self._action(
            self._expr.keyword(Keyword.DROP),
            self._expr.keyword(Keyword.CONSTRAINT),
            self._expr.identifier(name),
        )

    def rename_to(self, table: str) -> AlterTableBuilder:
        return self._action(self._expr.keyword(Keyword.RENAME_TO), self._expr.identifier(table))

    def _action(self, *parts: Any) -> AlterTableBuilder:
        self.section(Keyword.ALTER).push(self._expr.expression(*parts))
        return self

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self._expr.keyword(Keyword.ALTER),
            self._expr.keyword(Keyword.TABLE),
            self.pipe_section(Keyword.TABLE, required=True, keyword=False,
                              message="ALTER TABLE requires a table name."),
            self.pipe_section(Keyword.ALTER, required=True, keyword=False,
                              message="ALTER TABLE requires at least one action."),
        )


class DropTableBuilder(SqlBuilder):
    """Builds ``DROP TABLE [IF EXISTS] "t" [CASCADE | RESTRICT]``."""

    def __init__(self, expression: SqlExpression, *, strict_features: bool = True) -> None:
        super().__init__(expression, strict_features=strict_features)
        self._if_exists = False
        self._behavior: Keyword | None = None

    def drop_table(self, table: str) -> DropTableBuilder:
        self.section(Keyword.TABLE).reset().push(self._expr.identifier(table))
        return self

    def if_exists(self) -> DropTableBuilder:
        self._require(Feature.IF_EXISTS)
        self._if_exists = True
        self._touch()
        return self

    def cascade(self) -> DropTableBuilder:
        return self._set_behavior(Keyword.CASCADE)

    def restrict(self) -> DropTableBuilder:
        return self._set_behavior(Keyword.RESTRICT)

    def _set_behavior(self, behavior: Keyword) -> DropTableBuilder:
        self._require(Feature.CASCADE)
        self._behavior = behavior
        self._touch()
        return self

    def _reset_state(self) -> None:
        self._if_exists = False
        self._behavior = None

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self._expr.keyword(Keyword.DROP),
            self._expr.keyword(Keyword.TABLE),
            self._expr.keyword(self.dialect.if_exists_clause()) if self._if_exists else None,
            self.pipe_section(Keyword.TABLE, required=True, keyword=False,
                              message="DROP TABLE requires a table name."),
            self._expr.keyword(self._behavior) if self._behavior else None,
        )


class TruncateTableBuilder(SqlBuilder):
    """Builds ``TRUNCATE TABLE "t"``."""

    def truncate_table(self, table: str) -> TruncateTableBuilder:
        self._require(Feature.TRUNCATE)
        self.section(Keyword.TABLE).reset().push(self._expr.identifier(table))
        return self

    def pipeline(self) -> SqlExpression:
        return self._pipe(
            self._expr.keyword(Keyword.TRUNCATE),
            self._expr.keyword(Keyword.TABLE),
            self.pipe_section(Keyword.TABLE, required=True, keyword=False,
                              message="TRUNCATE TABLE requires a table name."),
        )


def _referential_action(action: str) -> str:
    normalized = " ".join(str(action).upper().split())
    if normalized not in REFERENTIAL_ACTIONS:
        raise InvalidArgumentError(
            f"Invalid referential action: '{action}'. Allowed: {', '.join(sorted(REFERENTIAL_ACTIONS))}.",
            argument="action",
        )
    return normalized
