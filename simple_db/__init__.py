"""simple_db: a small SQL access layer with table helpers and account security."""

from .core.settings import Settings
from .db import (
    ConnectFailed,
    Connection,
    CountFailed,
    Database,
    DatabaseError,
    QueryResult,
    SelectOptions,
    Table,
)
from .services import MemorySession, SecurityService, SessionContext

__version__ = "0.1.0"

__all__ = [
    "ConnectFailed",
    "Connection",
    "CountFailed",
    "Database",
    "DatabaseError",
    "MemorySession",
    "QueryResult",
    "SecurityService",
    "SelectOptions",
    "SessionContext",
    "Settings",
    "Table",
]
