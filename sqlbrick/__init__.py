"""sqlbrick – composable SQL statements as expression trees.

Build Queries as Trees. Render Them per Dialect.

Public API
----------
``DbalManager``
    Entry point: pick a dialect, then get DML / DDL builders from it.

``SqlExpression``
    The dialect-bound vocabulary for keywords, identifiers, values,
    conditions, CASE and aggregate functions.

``SelectBuilder``, ``InsertBuilder``, ``UpdateBuilder``, ``DeleteBuilder``,
``RawBuilder`` and the DDL builders
    Section-pipeline statement builders.

Extensibility
-------------
New dialects can be registered via::

    from sqlbrick.dialect.registry import DialectFactory

    @DialectFactory.register("mariadb")
    class MariaDBDialect(MySQLDialect):
        ...

After registration, ``DbalManager("mariadb")`` and
``DbalConfig(dialect="mariadb")`` pick it up automatically.
"""

from __future__ import annotations

import logging

from sqlbrick.builder import (
    NO_DEFAULT,
    AlterTableBuilder,
    BindingMap,
    BuilderState,
    CompiledSQL,
    CreateTableBuilder,
    DeleteBuilder,
    DropTableBuilder,
    FilteringBuilder,
    InsertBuilder,
    RawBuilder,
    SelectBuilder,
    SqlBuilder,
    TruncateTableBuilder,
    UpdateBuilder,
)
from sqlbrick.config import DbalConfig
from sqlbrick.dialect import (
    DialectFactory,
    Feature,
    MySQLDialect,
    PostgresDialect,
    SQLDialect,
    SQLiteDialect,
)
from sqlbrick.errors import (
    ConfigurationError,
    InvalidArgumentError,
    InvalidBindingError,
    InvalidOperatorError,
    MissingSectionError,
    SqlBrickError,
    UnsupportedFeatureError,
)
from sqlbrick.expression import (
    DialectRule,
    Expression,
    ExpressionType,
    Keyword,
    SqlExpression,
)
from sqlbrick.manager import DbalManager, DdlManager, DmlManager

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("postgresql", PostgresDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("pgsql", PostgresDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "DbalManager",
    "DmlManager",
    "DdlManager",
    "DbalConfig",
    # Dialects
    "SQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "DialectFactory",
    "Feature",
    # Expressions
    "Expression",
    "ExpressionType",
    "DialectRule",
    "SqlExpression",
    "Keyword",
    # Builders
    "SqlBuilder",
    "FilteringBuilder",
    "BuilderState",
    "CompiledSQL",
    "BindingMap",
    "SelectBuilder",
    "InsertBuilder",
    "UpdateBuilder",
    "DeleteBuilder",
    "RawBuilder",
    "CreateTableBuilder",
    "AlterTableBuilder",
    "DropTableBuilder",
    "TruncateTableBuilder",
    "NO_DEFAULT",
    # Errors
    "SqlBrickError",
    "InvalidArgumentError",
    "InvalidOperatorError",
    "MissingSectionError",
    "InvalidBindingError",
    "ConfigurationError",
    "UnsupportedFeatureError",
]
