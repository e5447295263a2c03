"""SQL text builders.

Pure functions: they take already-serialized literals through a ``literal``
callable and never touch a connection. ``where`` / ``condition`` arguments
are raw SQL supplied by the caller and are inserted verbatim; escaping any
literal embedded in them is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

Literal = Callable[[Any], str]


@dataclass(frozen=True)
class SelectOptions:
    select: str = "*"
    where: Optional[str] = None
    order_by: Optional[str] = None
    order_dir: Optional[str] = None
    limit: Optional[int] = None
    # 1-based; takes precedence over offset
    page: Optional[int] = None
    offset: Optional[int] = None


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page. Pages below 1 are clamped to page 1."""
    return max(int(page) - 1, 0) * int(limit)


def build_select(table: str, options: SelectOptions) -> str:
    sql = f"SELECT {options.select or '*'} FROM {table}"

    if options.where:
        sql += f" WHERE {options.where}"

    if options.order_by:
        sql += f" ORDER BY {options.order_by}"
        if options.order_dir:
            sql += f" {options.order_dir}"

    # page/offset are only meaningful alongside a limit
    if options.limit is not None:
        sql += f" LIMIT {int(options.limit)}"
        if options.page is not None:
            sql += f" OFFSET {page_offset(options.page, options.limit)}"
        elif options.offset is not None:
            sql += f" OFFSET {int(options.offset)}"

    return sql + ";"


def build_count(table: str, condition: str = "") -> str:
    sql = f"SELECT count(*) AS total FROM {table}"
    if condition:
        sql += f" WHERE {condition}"
    return sql + ";"


def build_insert(table: str, row: Mapping[str, Any], literal: Literal) -> str:
    if not row:
        raise ValueError("insert requires at least one column")
    columns = ", ".join(row.keys())
    values = ", ".join(literal(v) for v in row.values())
    return f"INSERT INTO {table} ({columns}) VALUES ({values});"


def build_update(table: str, row: Mapping[str, Any], literal: Literal, condition: str = "") -> str:
    if not row:
        raise ValueError("update requires at least one column")
    assignments = ", ".join(f"{k}={literal(v)}" for k, v in row.items())
    sql = f"UPDATE {table} SET {assignments}"
    if condition:
        sql += f" WHERE {condition}"
    return sql + ";"


def build_delete(table: str, condition: str) -> str:
    return f"DELETE FROM {table} WHERE {condition};"
