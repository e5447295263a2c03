from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: URL) -> bool:
    return url.database in (None, "", ":memory:")


def create_db_engine(database_url: str | URL, *, echo: bool = False) -> Engine:
    """Create the SQLAlchemy engine a Connection drives raw SQL through.

    Notes:
      - SQLite needs check_same_thread=False so one handle can be shared behind a lock.
      - File-backed SQLite uses NullPool; the Connection keeps its own single handle anyway.
    """
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    connect_args: dict = {}
    if is_sqlite:
        connect_args["check_same_thread"] = False
        connect_args.setdefault("timeout", 5)

    engine_kwargs = dict(
        echo=echo,
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,
    )
    if is_sqlite and not _is_memory_sqlite(url):
        engine_kwargs["poolclass"] = NullPool

    engine = create_engine(url, **engine_kwargs)

    if is_sqlite:

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute("PRAGMA busy_timeout=5000")
            finally:
                cursor.close()

    logger.debug("Created engine for %s", url.render_as_string(hide_password=True))
    return engine
