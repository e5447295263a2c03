"""Database package.

Connection owns the live handle, Database builds and runs statements,
Table scopes a Database to one table, QueryResult carries what came back.
"""

from .connection import ConnectFailed, Connection, DatabaseError, StatementOutcome
from .database import CountFailed, Database
from .result import QueryResult
from .session import create_db_engine
from .statements import SelectOptions
from .table import Table

__all__ = [
    "ConnectFailed",
    "Connection",
    "CountFailed",
    "Database",
    "DatabaseError",
    "QueryResult",
    "SelectOptions",
    "StatementOutcome",
    "Table",
    "create_db_engine",
]
