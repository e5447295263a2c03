from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from simple_db.db.database import Database
from simple_db.db.result import QueryResult
from simple_db.db.statements import SelectOptions
from simple_db.db.values import SqlValue

logger = logging.getLogger(__name__)


class Table:
    """A Database scoped to one table and its primary key column."""

    def __init__(self, db: Database, name: str, primary_key: str):
        self._db = db
        self._name = name
        self._primary_key = primary_key

    @property
    def db(self) -> Database:
        return self._db

    @property
    def name(self) -> str:
        return self._name

    @property
    def primary_key(self) -> str:
        return self._primary_key

    def _pk_condition(self, value: SqlValue) -> str:
        return f"{self._primary_key}={self._db.literal(value)}"

    def select(self, options: Optional[SelectOptions] = None, **kwargs: Any) -> QueryResult:
        return self._db.select(self._name, options, **kwargs)

    def select_one(self, value: SqlValue) -> QueryResult:
        return self.select(where=self._pk_condition(value), limit=1)

    def count(self, condition: str = "") -> int:
        return self._db.count(self._name, condition)

    def insert(self, row: Mapping[str, SqlValue]) -> Optional[QueryResult]:
        """Insert a row and return it as stored (generated key included).

        None if the insert failed or the new row could not be read back.
        """
        inserted = self._db.insert(self._name, row)
        if inserted is None or not inserted.rows:
            return None

        new_id = inserted.rows[0]["id"]
        selected = self.select_one(new_id)
        if selected.count() != 1:
            logger.warning("Row %s=%s inserted into %s could not be read back", self._primary_key, new_id, self._name)
            return None
        return QueryResult(inserted.outcome, selected.rows)

    def update(self, row: Mapping[str, SqlValue], condition: str = "") -> QueryResult:
        return self._db.update(self._name, row, condition)

    def update_one(self, row: Mapping[str, SqlValue], value: SqlValue) -> QueryResult:
        return self.update(row, self._pk_condition(value))

    def delete(self, condition: str) -> QueryResult:
        return self._db.delete(self._name, condition)

    def delete_one(self, value: SqlValue) -> QueryResult:
        return self.delete(self._pk_condition(value))
