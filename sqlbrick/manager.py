"""Entry-point façades that hand out fresh statement builders.

``DbalManager`` owns the dialect-bound vocabulary prototype and exposes the
DML and DDL managers.  Every builder call goes through an explicit factory
and returns a new, empty builder; no builder state is shared between calls.

Usage::

    dbal = DbalManager("postgresql")
    sql = dbal.dml().select("id", "name").from_("users").where({"active": True}).render()
    ddl = dbal.ddl().create_table("users").add_column("id", "SERIAL").primary_key("id").render()

Custom builders can be injected per manager::

    dml = DmlManager(expr, factories={"select": MySelectBuilder})
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from sqlbrick.builder.base import SqlBuilder
from sqlbrick.builder.ddl import (
    AlterTableBuilder,
    CreateTableBuilder,
    DropTableBuilder,
    TruncateTableBuilder,
)
from sqlbrick.builder.delete import DeleteBuilder
from sqlbrick.builder.insert import InsertBuilder
from sqlbrick.builder.raw import RawBuilder
from sqlbrick.builder.select import SelectBuilder
from sqlbrick.builder.update import UpdateBuilder
from sqlbrick.config import DbalConfig
from sqlbrick.dialect.base import SQLDialect
from sqlbrick.dialect.registry import DialectFactory
from sqlbrick.errors import ConfigurationError
from sqlbrick.expression.sql import Quoter, SqlExpression

logger = logging.getLogger(__name__)

#: ``factory(expression, strict_features=...) -> builder``; a builder class fits.
BuilderFactory = Callable[..., SqlBuilder]


class _BuilderManager:
    """Shared factory plumbing for the DML and DDL managers."""

    default_factories: ClassVar[dict[str, BuilderFactory]] = {}

    def __init__(
        self,
        expression: SqlExpression,
        *,
        strict_features: bool = True,
        factories: Mapping[str, BuilderFactory] | None = None,
    ) -> None:
        if not isinstance(expression, SqlExpression):
            raise ConfigurationError(
                f"{self.__class__.__name__} requires a SqlExpression prototype, "
                f"got {type(expression).__name__}."
            )
        unknown = set(factories or {}) - set(self.default_factories)
        if unknown:
            raise ConfigurationError(
                f"Unknown builder factories for {self.__class__.__name__}: {sorted(unknown)}."
            )
        self._expression = expression
        self._strict_features = strict_features
        self._factories = {**self.default_factories, **(factories or {})}

    @property
    def dialect(self) -> SQLDialect:
        return self._expression.dialect

    def expression(self, *items: Any) -> SqlExpression:
        """Return a new vocabulary node, e.g. ``dml.expression().count()``."""
        return self._expression.expression(*items)

    def _create(self, kind: str) -> Any:
        builder = self._factories[kind](self._expression, strict_features=self._strict_features)
        if not isinstance(builder, SqlBuilder):
            raise ConfigurationError(f"Factory for '{kind}' returned {type(builder).__name__}, not a SqlBuilder.")
        return builder


class DmlManager(_BuilderManager):
    """Creates SELECT / INSERT / UPDATE / DELETE / raw statement builders."""

    default_factories: ClassVar[dict[str, BuilderFactory]] = {
        "select": SelectBuilder,
        "insert": InsertBuilder,
        "update": UpdateBuilder,
        "delete": DeleteBuilder,
        "raw": RawBuilder,
    }

    def select(self, *columns: Any) -> SelectBuilder:
        builder = self._create("select")
        return builder.select(*columns) if columns else builder

    def insert(self, table: Any = None) -> InsertBuilder:
        return self._create("insert").insert(table)

    def update(self, table: Any = None) -> UpdateBuilder:
        builder = self._create("update")
        return builder.update(table) if table is not None else builder

    def delete(self, table: Any = None) -> DeleteBuilder:
        return self._create("delete").delete(table)

    def raw(self, *parts: Any) -> RawBuilder:
        builder = self._create("raw")
        return builder.raw(*parts) if parts else builder


class DdlManager(_BuilderManager):
    """Creates CREATE / ALTER / DROP / TRUNCATE TABLE builders."""

    default_factories: ClassVar[dict[str, BuilderFactory]] = {
        "create_table": CreateTableBuilder,
        "alter_table": AlterTableBuilder,
        "drop_table": DropTableBuilder,
        "truncate_table": TruncateTableBuilder,
    }

    def create_table(self, table: str) -> CreateTableBuilder:
        return self._create("create_table").create_table(table)

    def alter_table(self, table: str) -> AlterTableBuilder:
        return self._create("alter_table").alter_table(table)

    def drop_table(self, table: str) -> DropTableBuilder:
        return self._create("drop_table").drop_table(table)

    def truncate_table(self, table: str) -> TruncateTableBuilder:
        return self._create("truncate_table").truncate_table(table)


class DbalManager:
    """Top-level façade: one dialect, one vocabulary prototype, two managers.

    Args:
        dialect: A registered dialect name or a :class:`SQLDialect` instance.
        quoter: Optional driver string-quoting function passed to the
            vocabulary prototype.
        strict_features: Forwarded to every builder.

    Raises:
        ConfigurationError: If the dialect name is not registered.
    """

    def __init__(
        self,
        dialect: str | SQLDialect = "mysql",
        *,
        quoter: Quoter | None = None,
        strict_features: bool = True,
    ) -> None:
        if isinstance(dialect, str):
            dialect = DialectFactory.create(dialect)
        self._expression = SqlExpression(dialect=dialect, quoter=quoter)
        self._strict_features = strict_features
        self._dml = DmlManager(self._expression, strict_features=strict_features)
        self._ddl = DdlManager(self._expression, strict_features=strict_features)
        logger.debug("DbalManager ready for %s (strict_features=%s)", dialect.name, strict_features)

    @classmethod
    def from_config(cls, config: DbalConfig, *, quoter: Quoter | None = None) -> DbalManager:
        return cls(config.create_dialect(), quoter=quoter, strict_features=config.strict_features)

    @property
    def dialect(self) -> SQLDialect:
        return self._expression.dialect

    @property
    def strict_features(self) -> bool:
        return self._strict_features

    def expression(self, *items: Any) -> SqlExpression:
        return self._expression.expression(*items)

    def dml(self) -> DmlManager:
        return self._dml

    def ddl(self) -> DdlManager:
        return self._ddl
