from __future__ import annotations

import pytest

from simple_db.db.statements import (
    SelectOptions,
    build_count,
    build_delete,
    build_insert,
    build_select,
    build_update,
    page_offset,
)
from simple_db.db.values import quote_string, to_sql_literal


def _literal(value):
    return to_sql_literal(value, quote_string)


def test_select_defaults_to_all_columns():
    assert build_select("accounts", SelectOptions()) == "SELECT * FROM accounts;"


def test_select_with_every_clause():
    opts = SelectOptions(
        select="id, name",
        where="balance > 5",
        order_by="id",
        order_dir="DESC",
        limit=10,
        page=3,
    )
    assert build_select("accounts", opts) == (
        "SELECT id, name FROM accounts WHERE balance > 5 ORDER BY id DESC LIMIT 10 OFFSET 20;"
    )


def test_order_dir_without_order_by_is_ignored():
    assert build_select("t", SelectOptions(order_dir="ASC")) == "SELECT * FROM t;"


@pytest.mark.parametrize("page", [0, -3, 1])
def test_pages_below_one_clamp_to_first_page(page):
    assert build_select("t", SelectOptions(limit=5, page=page)) == "SELECT * FROM t LIMIT 5 OFFSET 0;"


def test_page_takes_precedence_over_offset():
    sql = build_select("t", SelectOptions(limit=5, page=2, offset=99))
    assert sql == "SELECT * FROM t LIMIT 5 OFFSET 5;"


def test_offset_used_when_no_page():
    assert build_select("t", SelectOptions(limit=5, offset=7)) == "SELECT * FROM t LIMIT 5 OFFSET 7;"


def test_offset_and_page_need_a_limit():
    assert build_select("t", SelectOptions(page=4, offset=7)) == "SELECT * FROM t;"


def test_page_offset_math():
    assert page_offset(1, 10) == 0
    assert page_offset(4, 10) == 30
    assert page_offset(0, 10) == 0


def test_count_with_and_without_condition():
    assert build_count("accounts") == "SELECT count(*) AS total FROM accounts;"
    assert build_count("accounts", "balance > 5") == "SELECT count(*) AS total FROM accounts WHERE balance > 5;"


def test_insert_keeps_mapping_order_and_escapes_strings():
    sql = build_insert("accounts", {"name": "O'Brien", "balance": 10, "active": True, "note": None}, _literal)
    assert sql == "INSERT INTO accounts (name, balance, active, note) VALUES ('O''Brien', 10, 1, NULL);"


def test_update_without_condition_targets_whole_table():
    assert build_update("accounts", {"balance": 20}, _literal) == "UPDATE accounts SET balance=20;"


def test_update_with_condition():
    sql = build_update("accounts", {"name": "bob", "balance": 1}, _literal, "id=3")
    assert sql == "UPDATE accounts SET name='bob', balance=1 WHERE id=3;"


def test_empty_rows_are_rejected():
    with pytest.raises(ValueError):
        build_insert("accounts", {}, _literal)
    with pytest.raises(ValueError):
        build_update("accounts", {}, _literal)


def test_delete():
    assert build_delete("accounts", "id=1") == "DELETE FROM accounts WHERE id=1;"
