"""sqlbrick statement builders: the section pipeline, DML and DDL."""
from sqlbrick.builder.base import BuilderState, CompiledSQL, FilteringBuilder, SqlBuilder
from sqlbrick.builder.bindings import BindingMap
from sqlbrick.builder.ddl import (
    NO_DEFAULT,
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

__all__ = [
    "BuilderState",
    "CompiledSQL",
    "FilteringBuilder",
    "SqlBuilder",
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
]
