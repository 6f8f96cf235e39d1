# ============================================================================
# SQLITE CLIENT
# ============================================================================
# STATUS: Drivers - SQLite adapter
# PURPOSE: Run compiled SQL on one sqlite3 connection
# CREATED: 17 OCT 2026
# EXPORTS: SQLiteClient
# DEPENDENCIES: sqlite3
# ============================================================================
"""
SQLite Client

One autocommit sqlite3 connection. A ``REGEXP`` function is registered on
connect so ``REGEXP`` check constraints and regex conditions work.
JSON values are bound as their JSON text, temporal values as ISO strings.
"""

import json
import re
import sqlite3
from datetime import date, datetime, time
from typing import Any, List, Optional, Sequence

from dbx.logging import ComponentType, get_logger
from drivers.base import ExecuteResult, Row

logger = get_logger(__name__, ComponentType.DRIVER)


def _regexp(pattern: Optional[str], value: Any) -> Optional[bool]:
    # X REGEXP Y calls regexp(Y, X)
    if pattern is None or value is None:
        return None
    return re.search(pattern, str(value), re.IGNORECASE) is not None


def _adapt(value: Any) -> Any:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


class SQLiteClient:
    """
    DatabaseClient over a single sqlite3 connection.
    """

    def __init__(self, filename: str = ":memory:"):
        logger.debug(f"Opening SQLite database {filename}")
        self.filename = filename
        self.connection = sqlite3.connect(filename, isolation_level=None, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self.connection.create_function("REGEXP", 2, _regexp, deterministic=True)

    def _cursor(self, sql: str, parameters: Optional[Sequence[Any]]) -> sqlite3.Cursor:
        return self.connection.execute(sql, [_adapt(p) for p in parameters or []])

    def execute(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> ExecuteResult:
        """Run one statement."""
        cur = self._cursor(sql, parameters)
        try:
            return ExecuteResult(affected_rows=max(cur.rowcount, 0), last_insert_id=cur.lastrowid)
        finally:
            cur.close()

    def query(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> List[Row]:
        """Run a query and fetch all rows as dicts."""
        cur = self._cursor(sql, parameters)
        try:
            return [dict(row) for row in cur.fetchall()]
        finally:
            cur.close()

    def close(self) -> None:
        self.connection.close()


__all__ = [
    "SQLiteClient",
]
