from __future__ import annotations

import json

from simple_db.db import QueryResult, StatementOutcome


def _result(rows):
    return QueryResult(StatementOutcome(rows=rows), rows)


def test_failed_result_has_empty_rows():
    result = QueryResult(None)
    assert not result.ok
    assert result.rows == []
    assert result.count() == 0
    assert result.first() is None


def test_count_matches_rows():
    result = _result([{"id": 1}, {"id": 2}])
    assert result.ok
    assert result.count() == len(result) == 2
    assert [r["id"] for r in result] == [1, 2]


def test_project_splits_prefixed_columns():
    result = _result([{"a_id": 1, "a_name": "x", "b_id": 9}, {"a_id": 2, "a_name": "y", "b_id": 8}])
    assert result.project("a_") == [{"id": 1, "name": "x"}, {"id": 2, "name": "y"}]
    assert result.project("b_") == [{"id": 9}, {"id": 8}]


def test_project_without_prefix_returns_rows_unchanged():
    rows = [{"a_id": 1}]
    assert _result(rows).project() == rows


def test_project_returns_copies():
    result = _result([{"a_id": 1}])
    result.project()[0]["a_id"] = 2
    result.project("a_")[0]["id"] = 3
    assert result.rows == [{"a_id": 1}]


def test_to_json_keeps_order_and_unicode():
    result = _result([{"name": "Zoë", "city": "Kraków"}, {"name": "Åsa", "city": "東京"}])
    text = result.to_json()
    assert text == '[{"name": "Zoë", "city": "Kraków"}, {"name": "Åsa", "city": "東京"}]'
    assert json.loads(text)[1]["city"] == "東京"


def test_to_json_with_prefix():
    result = _result([{"u_name": "ann", "r_name": "admin"}])
    assert result.to_json("r_") == '[{"name": "admin"}]'
