from __future__ import annotations

from pathlib import Path
import sys

# Ensure repo root is importable
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


import pytest

from simple_db.db import Connection, Database
from simple_db.services import SecurityService


ACCOUNTS_SCHEMA = """
CREATE TABLE accounts (
    id       INTEGER PRIMARY KEY AUTOINCREMENT,
    name     TEXT NOT NULL,
    balance  INTEGER NOT NULL DEFAULT 0
);
"""

ACCOUNT_SCHEMA = """
CREATE TABLE account (
    account_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    account_name      TEXT NOT NULL,
    account_password  TEXT NOT NULL,
    email             TEXT
);
"""

ROLE_SCHEMA = """
CREATE TABLE role (
    role_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id  INTEGER NOT NULL,
    role_name   TEXT NOT NULL
);
"""


@pytest.fixture()
def connection():
    # in-memory: the Connection's single handle keeps the database alive
    conn = Connection("sqlite://")
    yield conn
    conn.close()


@pytest.fixture()
def db(connection: Connection) -> Database:
    database = Database(connection)
    assert database.scalar(ACCOUNTS_SCHEMA).ok
    return database


@pytest.fixture()
def security(connection: Connection) -> SecurityService:
    database = Database(connection)
    assert database.scalar(ACCOUNT_SCHEMA).ok
    assert database.scalar(ROLE_SCHEMA).ok
    return SecurityService(database)
