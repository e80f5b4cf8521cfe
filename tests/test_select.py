"""Unit tests for SelectBuilder (all dialects)."""

from __future__ import annotations

import pytest

from sqlbrick.builder.base import BuilderState, CompiledSQL
from sqlbrick.builder.select import SelectBuilder
from sqlbrick.dialect import PostgresDialect
from sqlbrick.errors import InvalidArgumentError, MissingSectionError


def test_select_columns_from_table(pg_dbal):
    sql = pg_dbal.dml().select("id", "name").from_("users").render()
    assert sql == 'SELECT "id", "name" FROM "users"'


def test_select_calls_accumulate(pg_dbal):
    q = pg_dbal.dml().select("id").from_("users")
    q.select(["name", "email"])
    assert q.render() == 'SELECT "id", "name", "email" FROM "users"'


def test_select_star_and_qualified_star(my_dbal):
    assert my_dbal.dml().select("*").from_("t").render() == "SELECT * FROM `t`"
    assert my_dbal.dml().select("u.*").from_({"u": "users"}).render() == "SELECT `u`.* FROM `users` AS `u`"


def test_select_aliases(pg_dbal):
    dml = pg_dbal.dml()
    sql = dml.select({"uid": "u.id", "n": dml.expression().count()}).from_("users").render()
    assert sql == 'SELECT "u"."id" AS "uid", (COUNT(*)) AS "n" FROM "users"'


def test_select_without_columns_raises(pg_dbal):
    with pytest.raises(MissingSectionError) as exc_info:
        pg_dbal.dml().select().from_("users").render()
    assert exc_info.value.section == "SELECT"


def test_empty_column_list_raises(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select([])


def test_distinct(pg_dbal):
    q = pg_dbal.dml().select("city").from_("users").distinct()
    assert q.render() == 'SELECT DISTINCT "city" FROM "users"'
    assert q.distinct(False).render() == 'SELECT "city" FROM "users"'


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


def test_where_mapping_and_chaining(pg_dbal):
    q = pg_dbal.dml().select("*").from_("orders").where({"status": "paid"}).or_where({"refund": None})
    assert q.render() == "SELECT * FROM \"orders\" WHERE (\"status\" = 'paid') OR (\"refund\" IS NULL)"


def test_where_mapping_and_where_in_accept_any_collection(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t").where({"id": {5}, "kind": range(1, 3)})
    assert q.render() == 'SELECT * FROM "t" WHERE ("id" IN (5) AND "kind" IN (1,2))'
    q = pg_dbal.dml().select("*").from_("t").where_in("id", frozenset({7}))
    assert q.render() == 'SELECT * FROM "t" WHERE ("id" IN (7))'


def test_where_group_mixes_raw_and_nodes(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t")
    q.where(q.expr.condition("a", ">", 1), "b < 2")
    assert q.render() == 'SELECT * FROM "t" WHERE ("a" > 1 AND b < 2)'


def test_where_helpers(pg_dbal):
    q = (
        pg_dbal.dml()
        .select("*")
        .from_("t")
        .where_in("id", [1, 2])
        .where_like("name", "a%")
        .where_between("age", 18, 65)
        .where_null("deleted_at")
        .where_not_null("email")
    )
    assert q.render() == (
        'SELECT * FROM "t" WHERE ("id" IN (1,2)) AND ("name" LIKE \'a%\') '
        'AND ("age" BETWEEN 18 AND 65) AND ("deleted_at" IS NULL) AND ("email" IS NOT NULL)'
    )


def test_where_case(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t").where_case("a > 1", True, False)
    assert q.render() == 'SELECT * FROM "t" WHERE (CASE WHEN a > 1 THEN TRUE ELSE FALSE END)'


def test_where_without_conditions_raises(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_("t").where()


def test_subquery_in_where(pg_dbal):
    dml = pg_dbal.dml()
    vip = dml.select("user_id").from_("vip")
    q = dml.select("*").from_("users")
    q.where(q.expr.in_("id", vip))
    assert q.render() == 'SELECT * FROM "users" WHERE ("id" IN (SELECT "user_id" FROM "vip"))'


# ---------------------------------------------------------------------------
# JOIN
# ---------------------------------------------------------------------------


def test_inner_and_left_join(pg_dbal):
    q = pg_dbal.dml().select("u.name", "o.total").from_({"u": "users"})
    q.join("orders", q.expr.condition("o.user_id", "=", q.expr.identifier("u.id")), alias="o")
    q.left_join("coupons", "c.order_id = o.id", alias="c")
    assert q.render() == (
        'SELECT "u"."name", "o"."total" FROM "users" AS "u" '
        'INNER JOIN "orders" AS "o" ON ("o"."user_id" = "u"."id") '
        'LEFT JOIN "coupons" AS "c" ON (c.order_id = o.id)'
    )


def test_right_cross_and_using_joins(my_dbal):
    q = (
        my_dbal.dml()
        .select("*")
        .from_("a")
        .right_join("b", "b.a_id = a.id")
        .cross_join("c", alias="cc")
        .join_using("d", "a_id", "kind")
    )
    assert q.render() == (
        "SELECT * FROM `a` RIGHT JOIN `b` ON (b.a_id = a.id) "
        "CROSS JOIN `c` AS `cc` INNER JOIN `d` USING (`a_id`, `kind`)"
    )


def test_join_using_requires_columns(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_("a").join_using("b")


def test_join_requires_conditions(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_("a").join("b")


# ---------------------------------------------------------------------------
# GROUP BY / HAVING / WINDOW / UNION / ORDER BY / LIMIT / LOCK
# ---------------------------------------------------------------------------


def test_group_by_and_having(pg_dbal):
    dml = pg_dbal.dml()
    count = dml.expression().count()
    q = (
        dml.select("dept", {"n": count})
        .from_("emp")
        .group_by("dept")
        .having(dml.expression().condition(count, ">", 5))
        .or_having("MAX(salary) > 100")
    )
    assert q.render() == (
        'SELECT "dept", (COUNT(*)) AS "n" FROM "emp" GROUP BY "dept" '
        "HAVING ((COUNT(*)) > 5) OR (MAX(salary) > 100)"
    )


def test_having_helpers(pg_dbal):
    q = pg_dbal.dml().select("dept").from_("emp").group_by("dept")
    q.having_in("dept", ["a", "b"]).having_like("dept", "x%")
    assert q.render().endswith("HAVING (\"dept\" IN ('a','b')) AND (\"dept\" LIKE 'x%')")


def test_named_window(pg_dbal):
    q = pg_dbal.dml().select("id").from_("t").window("w", partition_by="dept", order_by="id")
    assert q.render() == 'SELECT "id" FROM "t" WINDOW "w" AS (PARTITION BY "dept" ORDER BY "id")'


def test_union_and_union_all_before_order_by(pg_dbal):
    dml = pg_dbal.dml()
    q = (
        dml.select("a").from_("t1")
        .union(dml.select("a").from_("t2"))
        .union_all(dml.select("a").from_("t3"))
        .order_by("a")
    )
    assert q.render() == (
        'SELECT "a" FROM "t1" UNION SELECT "a" FROM "t2" '
        'UNION ALL SELECT "a" FROM "t3" ORDER BY "a"'
    )


def test_union_rejects_plain_values(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("a").from_("t").union("SELECT 1")


def test_order_by_directions(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t").order_by("name", {"created": "desc", "score": "nulls last"})
    assert q.render() == 'SELECT * FROM "t" ORDER BY "name", "created" DESC, "score" NULLS LAST'


def test_order_by_invalid_direction_raises(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_("t").order_by({"a": "sideways"})


def test_limit_per_dialect(my_dbal, pg_dbal, sq_dbal):
    assert my_dbal.dml().select("*").from_("t").limit(10, 20).render() == "SELECT * FROM `t` LIMIT 20, 10"
    assert pg_dbal.dml().select("*").from_("t").limit(10).offset(20).render() == (
        'SELECT * FROM "t" LIMIT 10 OFFSET 20'
    )
    assert sq_dbal.dml().select("*").from_("t").limit(5).render() == 'SELECT * FROM "t" LIMIT 5'


@pytest.mark.parametrize("bad", [-1, True, 1.5, "10"])
def test_limit_rejects_bad_values(pg_dbal, bad):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_("t").limit(bad)


def test_offset_without_limit_raises(pg_dbal):
    with pytest.raises(MissingSectionError):
        pg_dbal.dml().select("*").from_("t").offset(5).render()


def test_locks(my_dbal):
    q = my_dbal.dml().select("*").from_("t").where({"id": 1}).lock_for_update()
    assert q.render() == "SELECT * FROM `t` WHERE (`id` = 1) FOR UPDATE"
    assert q.lock_in_share_mode().render().endswith("LOCK IN SHARE MODE")
    assert "FOR UPDATE" not in q.render()


def test_explain_describe_and_comment(pg_dbal):
    dml = pg_dbal.dml()
    assert dml.select("*").from_("t").explain().render() == 'EXPLAIN SELECT * FROM "t"'
    assert dml.select("*").from_("t").describe().render() == 'DESCRIBE SELECT * FROM "t"'
    q = dml.select(dml.expression().raw("1")).comment("health */ check")
    assert q.render() == "/* health * / check */ SELECT 1"


# ---------------------------------------------------------------------------
# Subqueries and CTEs
# ---------------------------------------------------------------------------


def test_subquery_in_from(pg_dbal):
    dml = pg_dbal.dml()
    sub = dml.select("id").from_("a")
    assert dml.select("*").from_({"s": sub}).render() == 'SELECT * FROM (SELECT "id" FROM "a") AS "s"'


def test_cte(pg_dbal):
    dml = pg_dbal.dml()
    recent = dml.select("id").from_("orders").where({"recent": True})
    q = dml.select("*").with_("recent", recent).with_("one", "SELECT 1").from_("recent")
    assert q.render() == (
        'WITH "recent" AS (SELECT "id" FROM "orders" WHERE ("recent" = TRUE)), '
        '"one" AS (SELECT 1) SELECT * FROM "recent"'
    )


def test_subquery_renders_lazily(pg_dbal):
    dml = pg_dbal.dml()
    sub = dml.select("id").from_("a")
    q = dml.select("*").from_({"s": sub})
    sub.where({"x": 1})
    assert q.render() == 'SELECT * FROM (SELECT "id" FROM "a" WHERE ("x" = 1)) AS "s"'


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def test_state_transitions(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t")
    assert q.state is BuilderState.BUILDING
    q.render()
    assert q.state is BuilderState.RENDERED
    q.where({"a": 1})
    assert q.state is BuilderState.BUILDING


def test_reset_section_and_all(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t").where({"a": 1}).limit(3).bind(a=1)
    q.reset("WHERE")
    assert q.render() == 'SELECT * FROM "t" LIMIT 3'
    q.reset("LIMIT")
    assert q.render() == 'SELECT * FROM "t"'
    q.reset()
    assert not q.has_bindings()
    with pytest.raises(MissingSectionError):
        q.render()


def test_prototype_is_fresh_and_same_class(pg_dbal):
    q = pg_dbal.dml().select("*").from_("t")
    fresh = q.prototype()
    assert isinstance(fresh, SelectBuilder)
    assert fresh is not q
    assert fresh.dialect == q.dialect
    assert fresh.select("x").render() == 'SELECT "x"'


def test_set_dialect_rerenders_whole_statement(my_dbal):
    dml = my_dbal.dml()
    sub = dml.select("id").from_("vip")
    q = dml.select("id").from_("users").where({"active": True}).where(dml.expression().in_("id", sub)).limit(5, 10)
    assert q.render() == (
        "SELECT `id` FROM `users` WHERE (`active` = 1) AND (`id` IN (SELECT `id` FROM `vip`)) LIMIT 10, 5"
    )
    q.set_dialect(PostgresDialect())
    assert q.render() == (
        'SELECT "id" FROM "users" WHERE ("active" = TRUE) AND ("id" IN (SELECT "id" FROM "vip")) '
        "LIMIT 5 OFFSET 10"
    )
    assert my_dbal.dialect.name == "mysql"
    assert sub.render() == "SELECT `id` FROM `vip`"
    assert sub.dialect.name == "mysql"


def test_embedded_statement_renders_in_outer_dialect(my_dbal, pg_dbal):
    sub = pg_dbal.dml().select("id").from_("vip").where({"tier": "gold"})
    q = my_dbal.dml().select("id").from_("users").where_in("id", sub)
    assert q.render() == (
        "SELECT `id` FROM `users` WHERE (`id` IN (SELECT `id` FROM `vip` WHERE (`tier` = 'gold')))"
    )
    assert sub.render() == 'SELECT "id" FROM "vip" WHERE ("tier" = \'gold\')'


def test_build_returns_compiled_sql(pg_dbal):
    q = pg_dbal.dml().select("*").from_("users")
    q.where(q.expr.condition("id", "=", q.expr.param("id"))).bind(id=5)
    compiled = q.build()
    assert isinstance(compiled, CompiledSQL)
    assert compiled.sql == 'SELECT * FROM "users" WHERE ("id" = %(id)s)'
    assert compiled.params == {"id": 5}
    assert compiled.dialect == "postgresql"
    assert compiled.merge_params({"tenant": "acme", "id": 6}) == {"id": 6, "tenant": "acme"}
    assert str(q) == compiled.sql


def test_clause_order_is_independent_of_call_order(pg_dbal):
    dml = pg_dbal.dml()
    expected = 'SELECT "id", "name" FROM "users" WHERE ("active" = TRUE) ORDER BY "name" LIMIT 10'
    forward = dml.select("id", "name").from_("users").where({"active": True}).order_by("name").limit(10)
    backward = dml.select().limit(10).order_by("name").where({"active": True}).from_("users").select("id", "name")
    assert forward.render() == backward.render() == expected


def test_from_without_tables_raises(pg_dbal):
    with pytest.raises(InvalidArgumentError):
        pg_dbal.dml().select("*").from_()
