"""Unit tests for the SqlExpression vocabulary."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from sqlbrick.dialect import MySQLDialect, PostgresDialect, SQLiteDialect
from sqlbrick.errors import ConfigurationError, InvalidArgumentError, InvalidOperatorError
from sqlbrick.expression.keywords import Keyword
from sqlbrick.expression.node import ExpressionType
from sqlbrick.expression.sql import SqlExpression


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def test_dialect_is_required():
    with pytest.raises(ConfigurationError):
        SqlExpression()
    with pytest.raises(ConfigurationError):
        SqlExpression(dialect="mysql")


def test_vocabulary_never_mutates_receiver(pg_expr):
    pg_expr.keyword("select")
    pg_expr.identifier("users")
    pg_expr.condition("a", "=", 1)
    assert pg_expr.is_empty()
    assert pg_expr.expression_type is ExpressionType.NONE


def test_expression_spawns_untyped_node_on_same_dialect(pg_expr):
    node = pg_expr.expression("a", "b")
    assert node.render() == "a b"
    assert node.dialect is pg_expr.dialect
    assert node is not pg_expr


# ---------------------------------------------------------------------------
# Atoms
# ---------------------------------------------------------------------------


def test_keyword_is_upper_cased(pg_expr):
    node = pg_expr.keyword("left join")
    assert node.render() == "LEFT JOIN"
    assert node.expression_type is ExpressionType.KEYWORD
    assert pg_expr.keyword(Keyword.ORDER_BY).render() == "ORDER BY"


def test_identifier_quoting_per_dialect(pg_expr, my_expr):
    assert pg_expr.identifier("users").render() == '"users"'
    assert my_expr.identifier("users").render() == "`users`"
    assert pg_expr.identifier("u.name").render() == '"u"."name"'
    assert my_expr.identifier("u.*").render() == "`u`.*"


def test_identifier_is_idempotent(my_expr):
    assert my_expr.identifier("`u`.`id`").render() == "`u`.`id`"


def test_empty_identifier_raises(pg_expr):
    with pytest.raises(InvalidArgumentError):
        pg_expr.identifier("")


def test_value_literals(pg_expr, my_expr):
    assert pg_expr.value("O'Reilly").render() == "'O''Reilly'"
    assert pg_expr.value(None).render() == "NULL"
    assert pg_expr.value(True).render() == "TRUE"
    assert my_expr.value(True).render() == "1"
    assert my_expr.value(False).render() == "0"
    assert pg_expr.value(42).render() == "42"
    assert pg_expr.value(1.5).render() == "1.5"
    assert pg_expr.value(Decimal("10.50")).render() == "10.50"
    assert pg_expr.value(date(2024, 1, 2)).render() == "'2024-01-02'"
    assert pg_expr.value(datetime(2024, 1, 2, 3, 4, 5)).render() == "'2024-01-02T03:04:05'"
    assert pg_expr.value("42").render() == "'42'"
    assert pg_expr.value("x").expression_type is ExpressionType.VALUE


def test_mysql_doubles_backslashes(my_expr):
    assert my_expr.value("a\\b'c").render() == "'a\\\\b''c'"


def test_non_finite_float_raises_on_render(pg_expr):
    node = pg_expr.value(float("nan"))
    with pytest.raises(InvalidArgumentError):
        node.render()


def test_quoter_handles_strings_only(postgres):
    expr = SqlExpression(dialect=postgres, quoter=lambda s: f"Q[{s}]")
    assert expr.value("x").render() == "Q[x]"
    assert expr.value(5).render() == "5"
    assert expr.value(None).render() == "NULL"


def test_param_placeholders(pg_expr, sqlite):
    assert pg_expr.param("id").render() == "%(id)s"
    assert SqlExpression(dialect=sqlite).param("id").render() == ":id"


def test_raw_is_verbatim(pg_expr):
    assert pg_expr.raw("NOW()").render() == "NOW()"


def test_operator_allow_list(pg_expr):
    assert pg_expr.operator("like").render() == "LIKE"
    assert pg_expr.operator("is  not").render() == "IS NOT"
    assert pg_expr.operator("<>").expression_type is ExpressionType.OPERATOR


def test_operator_outside_allow_list_raises(pg_expr):
    with pytest.raises(InvalidOperatorError) as exc_info:
        pg_expr.operator("; DROP")
    assert exc_info.value.operator == "; DROP"
    assert "=" in exc_info.value.allowed
    assert isinstance(exc_info.value, InvalidArgumentError)


# ---------------------------------------------------------------------------
# Composites
# ---------------------------------------------------------------------------


def test_alias_of_name(pg_expr):
    node = pg_expr.alias("total", "amount")
    assert node.render() == '"amount" AS "total"'
    assert node.expression_type is ExpressionType.ALIAS


def test_alias_of_node_groups_without_mutating(pg_expr):
    count = pg_expr.count()
    assert pg_expr.alias("n", count).render() == '(COUNT(*)) AS "n"'
    assert count.render() == "COUNT(*)"


def test_condition_right_hand_forms(pg_expr):
    assert pg_expr.condition("age", ">", 18).render() == '"age" > 18'
    assert pg_expr.condition("name", "=", "bob").render() == "\"name\" = 'bob'"
    assert pg_expr.condition("deleted_at", "IS").render() == '"deleted_at" IS NULL'
    assert pg_expr.condition("id", "IN", [1, 2, 3]).render() == '"id" IN (1,2,3)'
    assert pg_expr.condition("s", "in", ("a", None)).render() == "\"s\" IN ('a',NULL)"
    assert pg_expr.condition("flag", "=", True).render() == '"flag" = TRUE'
    assert pg_expr.condition("a", "=", pg_expr.identifier("b")).render() == '"a" = "b"'


def test_condition_node_left_is_parenthesized(pg_expr):
    node = pg_expr.condition(pg_expr.count(), ">", 5)
    assert node.render() == "(COUNT(*)) > 5"
    assert node.expression_type is ExpressionType.CONDITION


def test_empty_in_list_raises(pg_expr):
    with pytest.raises(InvalidArgumentError):
        pg_expr.in_("id", [])


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf"), Decimal("NaN")])
def test_non_finite_operand_raises_on_render(pg_expr, bad):
    with pytest.raises(InvalidArgumentError):
        pg_expr.condition("x", ">", bad).render()
    with pytest.raises(InvalidArgumentError):
        pg_expr.between("x", 0, bad).render()


def test_numeric_operands_go_through_dialect(pg_expr):
    assert pg_expr.condition("price", "<", Decimal("9.50")).render() == '"price" < 9.50'
    assert pg_expr.between("ratio", 0.25, 1.5).render() == '"ratio" BETWEEN 0.25 AND 1.5'


def test_any_collection_is_a_value_list(pg_expr):
    assert pg_expr.in_("id", range(3)).render() == '"id" IN (0,1,2)'
    assert pg_expr.in_("id", frozenset({4})).render() == '"id" IN (4)'
    assert pg_expr.in_("tag", {"x"}).render() == "\"tag\" IN ('x')"
    assert pg_expr.in_("id", (n * 2 for n in (1, 2))).render() == '"id" IN (2,4)'
    assert pg_expr.in_("id", {1: "a", 2: "b"}.keys()).render() == '"id" IN (1,2)'


def test_string_is_one_value_and_empty_set_raises(pg_expr):
    assert pg_expr.condition("code", "=", "abc").render() == "\"code\" = 'abc'"
    with pytest.raises(InvalidArgumentError):
        pg_expr.in_("id", set())


def test_predicate_shortcuts(pg_expr):
    assert pg_expr.like("name", "a%").render() == "\"name\" LIKE 'a%'"
    assert pg_expr.in_("id", [7]).render() == '"id" IN (7)'
    assert pg_expr.between("age", 18, 65).render() == '"age" BETWEEN 18 AND 65'
    assert pg_expr.is_null("x").render() == '"x" IS NULL'
    assert pg_expr.is_not_null("x").render() == '"x" IS NOT NULL'


def test_case(pg_expr):
    assert pg_expr.case("a > 1", "big", "small").render() == "CASE WHEN a > 1 THEN 'big' ELSE 'small' END"
    node = pg_expr.case(pg_expr.condition("a", ">", 1), "y")
    assert node.render() == "CASE WHEN (\"a\" > 1) THEN 'y' END"


def test_functions(pg_expr):
    assert pg_expr.fn("lower", "name").render() == 'LOWER("name")'
    assert pg_expr.count().render() == "COUNT(*)"
    assert pg_expr.count("id").render() == 'COUNT("id")'
    assert pg_expr.sum("amount").render() == 'SUM("amount")'
    assert pg_expr.avg("amount").render() == 'AVG("amount")'
    assert pg_expr.min("amount").render() == 'MIN("amount")'
    assert pg_expr.max(pg_expr.raw("a + b")).render() == "MAX(a + b)"


def test_over(pg_expr):
    node = pg_expr.over(pg_expr.count(), partition_by="dept", order_by=["hired", "id"])
    assert node.render() == 'COUNT(*) OVER (PARTITION BY "dept" ORDER BY "hired", "id")'


# ---------------------------------------------------------------------------
# Dialect swap
# ---------------------------------------------------------------------------


def test_set_dialect_rebinds_descendants_before_render():
    expr = SqlExpression(dialect=MySQLDialect())
    node = expr.expression(expr.identifier("users"), expr.value(True), expr.param("p"))
    assert node.render() == "`users` 1 %(p)s"
    node.set_dialect(SQLiteDialect())
    assert node.render() == '"users" 1 :p'
    node.set_dialect(PostgresDialect())
    assert node.render() == '"users" TRUE %(p)s'


def test_set_dialect_rejects_non_dialect():
    expr = SqlExpression(dialect=MySQLDialect())
    with pytest.raises(ConfigurationError):
        expr.set_dialect("postgresql")
