from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from simple_db.db.connection import StatementOutcome

Row = Dict[str, Any]


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one statement plus the rows it materialized.

    outcome is None when the statement failed; rows is always a list.
    """

    outcome: Optional[StatementOutcome]
    rows: List[Row] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is not None

    def count(self) -> int:
        return len(self.rows)

    def first(self) -> Optional[Row]:
        return self.rows[0] if self.rows else None

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def project(self, prefix: str = "") -> List[Row]:
        """Keep only columns starting with ``prefix`` and strip it from their names.

        Used to split aliased column sets (``a_id``, ``a_name``, ``b_id``...)
        fetched in one row set back into per-entity rows.
        """
        if not prefix:
            return [dict(row) for row in self.rows]
        n = len(prefix)
        return [{k[n:]: v for k, v in row.items() if k.startswith(prefix)} for row in self.rows]

    def to_json(self, prefix: str = "") -> str:
        return json.dumps(self.project(prefix), ensure_ascii=False, default=str)
