from __future__ import annotations

import logging
import math
import secrets
from typing import Any, Mapping, Optional

from sqlalchemy.engine import URL

from simple_db.core.settings import Settings
from simple_db.db.connection import Connection, DatabaseError
from simple_db.db.result import QueryResult
from simple_db.db.statements import (
    SelectOptions,
    build_count,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from simple_db.db.values import SqlValue, to_sql_literal

logger = logging.getLogger(__name__)

ID_ALPHABET = "aAbBcCdDeEfFgGhHiIjJkKlLmMnNoOpPqQrRsStTuUvVwWxXyYzZ0123456789"


class CountFailed(DatabaseError):
    pass


class Database:
    """Builds SQL from structured arguments and runs it through a Connection.

    Failed statements never raise here: they come back as a QueryResult whose
    ``outcome`` is None (or as None for insert). ``count`` is the exception,
    since it has no value it could return instead.
    """

    def __init__(self, connection: Connection):
        self._connection = connection

    @classmethod
    def from_url(cls, url: str | URL, *, charset: Optional[str] = None, echo: bool = False) -> "Database":
        return cls(Connection(url, charset=charset, echo=echo))

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls.from_url(settings.database_url, charset=settings.db_charset or None, echo=settings.db_echo)

    @property
    def connection(self) -> Connection:
        return self._connection

    def close(self) -> None:
        self._connection.close()

    # ------------------------------------------------------------------
    # Raw statements
    # ------------------------------------------------------------------

    def query(self, sql: str) -> QueryResult:
        """Execute a statement and materialize every row it returns."""
        outcome = self._connection.execute(sql)
        rows = [dict(row) for row in outcome.rows or []] if outcome is not None else []
        return QueryResult(outcome, rows)

    def scalar(self, sql: str) -> QueryResult:
        """Execute a statement whose rows don't matter (DDL, UPDATE, DELETE...)."""
        return QueryResult(self._connection.execute(sql))

    # ------------------------------------------------------------------
    # Structured statements
    # ------------------------------------------------------------------

    def select(self, table: str, options: Optional[SelectOptions] = None, **kwargs: Any) -> QueryResult:
        """Select rows from a table.

        Options may be given as a SelectOptions or as its fields, e.g.
        ``db.select("account", where="balance > 5", limit=10, page=2)``.
        """
        if options is None:
            options = SelectOptions(**kwargs)
        elif kwargs:
            raise TypeError("Pass either a SelectOptions or keyword options, not both")
        return self.query(build_select(table, options))

    def count(self, table: str, condition: str = "") -> int:
        sql = build_count(table, condition)
        outcome = self._connection.execute(sql)
        if outcome is None or not outcome.rows:
            raise CountFailed(f"Could not count rows of {table}")
        return int(outcome.rows[0]["total"])

    def page_count(self, table: str, condition: str, limit: int) -> int:
        if limit <= 0:
            raise ValueError("limit must be positive")
        return math.ceil(self.count(table, condition) / limit)

    def insert(self, table: str, row: Mapping[str, SqlValue]) -> Optional[QueryResult]:
        """Insert one row.

        Returns a result whose single row is ``{"id": <generated id>}``, or
        None if the insert or the id lookup failed.
        """
        sql = build_insert(table, row, self.literal)
        inserted, last_id = self._connection.execute_batch([sql, self._connection.last_insert_id_sql()])

        if inserted is None or last_id is None or not last_id.rows:
            logger.warning("Insert into %s failed", table)
            return None
        return QueryResult(inserted, [last_id.rows[0]])

    def update(self, table: str, row: Mapping[str, SqlValue], condition: str = "") -> QueryResult:
        """Update rows meeting ``condition``. An empty condition updates every row."""
        return self.scalar(build_update(table, row, self.literal, condition))

    def delete(self, table: str, condition: str) -> QueryResult:
        return self.scalar(build_delete(table, condition))

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def escape(self, raw: str) -> str:
        """Escape a string and wrap it in quotes, ready to embed in a condition."""
        return self._connection.escape(raw)

    wrap = escape

    def literal(self, value: SqlValue) -> str:
        return to_sql_literal(value, self._connection.escape)

    def get_character_set(self) -> Optional[str]:
        return self._connection.get_character_set()

    def set_character_set(self, charset: str) -> bool:
        return self._connection.set_character_set(charset)

    @staticmethod
    def rand_id(count: int, prefix: str = "", haystack: str = ID_ALPHABET) -> str:
        """Random string of total length ``count``, prefix included."""
        n = max(int(count) - len(prefix), 0)
        return prefix + "".join(secrets.choice(haystack) for _ in range(n))
