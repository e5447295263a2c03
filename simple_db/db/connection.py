"""
Lazily opened database handle that executes raw statement text.

A Connection owns exactly one live SQLAlchemy connection, opened on first
use and reused for every statement issued through it. Statements are sent
verbatim (no driver-side parameter formatting) and committed one by one.

Failure policy:
    - failing to open the handle is fatal: ConnectFailed is raised and the
      handle stays unset so a later call can retry
    - a failing statement is rolled back, logged, and reported as None
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.engine import URL, Engine
from sqlalchemy.engine import Connection as SAConnection
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError

from simple_db.db.session import create_db_engine
from simple_db.db.values import quote_string

logger = logging.getLogger(__name__)


_LAST_INSERT_ID_SQL = {
    "mysql": "SELECT LAST_INSERT_ID() AS id;",
    "mariadb": "SELECT LAST_INSERT_ID() AS id;",
    "sqlite": "SELECT last_insert_rowid() AS id;",
    "postgresql": "SELECT lastval() AS id;",
}

_SET_CHARSET_SQL = {
    "mysql": "SET NAMES {charset};",
    "mariadb": "SET NAMES {charset};",
    "postgresql": "SET client_encoding TO {charset};",
    "sqlite": "PRAGMA encoding = {charset};",
}

_GET_CHARSET_SQL = {
    "mysql": "SELECT @@character_set_client AS charset;",
    "mariadb": "SELECT @@character_set_client AS charset;",
    "postgresql": "SHOW client_encoding;",
    "sqlite": "PRAGMA encoding;",
}


class DatabaseError(RuntimeError):
    pass


class ConnectFailed(DatabaseError):
    pass


@dataclass(frozen=True)
class StatementOutcome:
    """What a successfully executed statement produced.

    rows is None for statements that do not return rows (INSERT, UPDATE, ...).
    """

    rows: Optional[List[Dict[str, Any]]]
    rowcount: int = -1


class Connection:
    """
    Wrapper around a single lazily-opened SQLAlchemy connection.

    Not reentrant across threads by itself; an internal lock serializes
    connect/execute/escape so a Connection may be shared.
    """

    def __init__(self, url: str | URL, *, charset: Optional[str] = None, echo: bool = False):
        self._url = make_url(url)
        self._charset = charset or None
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._conn: Optional[SAConnection] = None
        self._lock = threading.RLock()

    @classmethod
    def from_parts(
        cls,
        host: str,
        user: str,
        password: str,
        db_name: str,
        *,
        charset: Optional[str] = None,
        drivername: str = "mysql+pymysql",
        port: Optional[int] = None,
        echo: bool = False,
    ) -> "Connection":
        url = URL.create(drivername, username=user, password=password, host=host, port=port, database=db_name)
        return cls(url, charset=charset, echo=echo)

    @property
    def url(self) -> URL:
        return self._url

    @property
    def dialect_name(self) -> str:
        return self._get_engine().dialect.name

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def _connect_failed(self, e: Exception) -> ConnectFailed:
        logger.error(
            "Could not connect to database %s: %s",
            self._url.render_as_string(hide_password=True),
            e,
        )
        return ConnectFailed(f"Could not connect to database: {e}")

    def _get_engine(self) -> Engine:
        with self._lock:
            if self._engine is None:
                # unknown dialects and missing drivers surface here
                try:
                    self._engine = create_db_engine(self._url, echo=self._echo)
                except (SQLAlchemyError, ImportError) as e:
                    raise self._connect_failed(e) from e
            return self._engine

    def _connect(self) -> SAConnection:
        if self._conn is None:
            engine = self._get_engine()
            try:
                conn = engine.connect()
            except SQLAlchemyError as e:
                engine.dispose()
                self._engine = None
                raise self._connect_failed(e) from e

            # Statements are sent verbatim; never let the driver %-format them.
            self._conn = conn.execution_options(no_parameters=True)
            logger.info("Connected to %s database", engine.dialect.name)

            if self._charset:
                self._apply_charset(self._charset)
        return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _run(self, conn: SAConnection, sql: str) -> Optional[StatementOutcome]:
        try:
            result = conn.exec_driver_sql(sql)
            rows = [dict(m) for m in result.mappings()] if result.returns_rows else None
            outcome = StatementOutcome(rows=rows, rowcount=result.rowcount)
            conn.commit()
        except (SQLAlchemyError, UnicodeError) as e:
            # UnicodeError: the driver could not encode the statement text
            conn.rollback()
            logger.warning("SQL error: %s", getattr(e, "orig", None) or e)
            logger.warning("Failed statement: %s", sql)
            return None
        return outcome

    def execute(self, sql: str) -> Optional[StatementOutcome]:
        """Execute one statement. Returns None if the engine rejected it."""
        with self._lock:
            conn = self._connect()
            return self._run(conn, sql)

    def execute_batch(self, sqls: Iterable[str]) -> List[Optional[StatementOutcome]]:
        """Execute statements in order on the same handle.

        A failing statement records None and does not stop the rest.
        """
        with self._lock:
            conn = self._connect()
            return [self._run(conn, sql) for sql in sqls]

    # ------------------------------------------------------------------
    # Escaping / dialect helpers
    # ------------------------------------------------------------------

    def escape(self, raw: str) -> str:
        """Escape ``raw`` and wrap it in single quotes."""
        with self._lock:
            conn = self._connect()
            # Detected by the MySQL dialect on first connect (sql_mode).
            backslash_escapes = bool(getattr(conn.dialect, "_backslash_escapes", False))
            return quote_string(str(raw), backslash_escapes=backslash_escapes)

    def last_insert_id_sql(self) -> str:
        return _LAST_INSERT_ID_SQL.get(self.dialect_name, _LAST_INSERT_ID_SQL["mysql"])

    def _apply_charset(self, charset: str) -> bool:
        template = _SET_CHARSET_SQL.get(self.dialect_name)
        if template is None:
            logger.warning("Character sets are not supported for dialect %s", self.dialect_name)
            return False
        sql = template.format(charset=quote_string(charset))
        return self._run(self._conn, sql) is not None

    def set_character_set(self, charset: str) -> bool:
        with self._lock:
            self._connect()
            self._charset = charset
            return self._apply_charset(charset)

    def get_character_set(self) -> Optional[str]:
        sql = _GET_CHARSET_SQL.get(self.dialect_name)
        if sql is None:
            return self._charset
        outcome = self.execute(sql)
        if outcome is None or not outcome.rows:
            return None
        return str(next(iter(outcome.rows[0].values())))
