from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Callable, Union

SqlValue = Union[str, int, float, Decimal, bool, None, dt.date, dt.datetime, dt.time]

# Same translation table as mysql_real_escape_string.
_MYSQL_ESCAPES = {
    "\\": "\\\\",
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "'": "\\'",
    '"': '\\"',
    "\x1a": "\\Z",
}


def quote_string(raw: str, *, backslash_escapes: bool = False) -> str:
    """Return ``raw`` as a single-quoted SQL string literal.

    MySQL servers running without NO_BACKSLASH_ESCAPES treat the backslash as
    an escape character, so it (and the other control characters the C client
    escapes) must be escaped too. Every other dialect only needs quotes doubled.
    """
    if backslash_escapes:
        body = "".join(_MYSQL_ESCAPES.get(ch, ch) for ch in raw)
    else:
        body = raw.replace("'", "''")
    return f"'{body}'"


def to_sql_literal(value: SqlValue, escape: Callable[[str], str]) -> str:
    """Serialize one value for interpolation into generated SQL.

    Strings (and temporal values, rendered as ISO text) go through ``escape``.
    Numbers are interpolated as-is, booleans as 1/0, None as NULL.
    """
    if value is None:
        return "NULL"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return escape(value)
    if isinstance(value, dt.datetime):
        return escape(value.isoformat(sep=" "))
    if isinstance(value, (dt.date, dt.time)):
        return escape(value.isoformat())
    raise TypeError(f"Unsupported SQL value type: {type(value).__name__}")
