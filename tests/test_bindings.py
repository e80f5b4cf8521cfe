"""Unit tests for BindingMap and builder-level bindings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from sqlbrick.builder.bindings import BindingMap
from sqlbrick.errors import InvalidArgumentError, InvalidBindingError


def test_bind_mapping_and_keywords():
    bindings = BindingMap({"a": 1}).bind({"b": "x"}, c=None)
    assert bindings.as_dict() == {"a": 1, "b": "x", "c": None}
    assert len(bindings) == 3
    assert list(bindings) == ["a", "b", "c"]


def test_later_values_overwrite():
    bindings = BindingMap().bind(a=1).bind({"a": 2})
    assert bindings.get("a") == 2


def test_scalar_types_accepted():
    uid = UUID("12345678-1234-5678-1234-567812345678")
    bindings = BindingMap().bind(d=date(2024, 1, 1), n=Decimal("1.5"), u=uid, b=b"\x00", f=True)
    assert bindings.get("u") == uid


@pytest.mark.parametrize("value", [[1, 2], {"k": 1}, object()])
def test_non_scalar_value_rejected(value):
    with pytest.raises(InvalidBindingError) as exc_info:
        BindingMap().bind(v=value)
    assert exc_info.value.name == "v"
    assert isinstance(exc_info.value, InvalidArgumentError)


def test_invalid_name_rejected():
    with pytest.raises(InvalidBindingError):
        BindingMap().bind({"": 1})
    with pytest.raises(InvalidBindingError):
        BindingMap().bind({3: 1})


def test_rejected_call_stores_nothing():
    bindings = BindingMap().bind(a=1)
    with pytest.raises(InvalidBindingError):
        bindings.bind(b=2, c=[3])
    assert bindings.as_dict() == {"a": 1}


def test_remove_get_and_clear():
    bindings = BindingMap().bind(a=1, b=2)
    bindings.remove("a").remove("missing")
    assert "a" not in bindings
    assert bindings.get("a", "default") == "default"
    assert bindings
    bindings.clear()
    assert not bindings


def test_as_dict_is_a_copy():
    bindings = BindingMap().bind(a=1)
    bindings.as_dict()["a"] = 99
    assert bindings.get("a") == 1


# ---------------------------------------------------------------------------
# Builder integration
# ---------------------------------------------------------------------------


def test_builder_binding_accessors(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t").bind({"a": 1}, b=2)
    assert q.has_bindings()
    assert q.has_binding("a")
    assert q.binding("b") == 2
    assert q.binding("zzz", 0) == 0
    q.remove_binding("a")
    assert q.bindings == {"b": 2}
    q.clear_bindings()
    assert not q.has_bindings()


def test_bindings_never_leak_into_sql(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t")
    q.where(q.expr.condition("id", "=", q.expr.param("id"))).bind(id="1; DROP TABLE t")
    assert "DROP" not in q.render()


def test_builder_bindings_are_independent(pg_dbal):
    first = pg_dbal.dml().select("*").from_("t").bind(a=1)
    second = pg_dbal.dml().select("*").from_("t")
    assert not second.has_bindings()
    assert first.prototype().bindings == {}
