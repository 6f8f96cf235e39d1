# ============================================================================
# POSTGRESQL CLIENT
# ============================================================================
# STATUS: Drivers - PostgreSQL adapter
# PURPOSE: Run compiled SQL on one psycopg connection
# CREATED: 17 OCT 2026
# EXPORTS: PostgresClient, build_conninfo
# DEPENDENCIES: psycopg
# ============================================================================
"""
PostgreSQL Client

One autocommit psycopg connection using ``RawCursor``, so statements keep
the ``$1..$n`` placeholders produced by ``renumber_positional`` and are sent
to the server as written. Rows come back as dicts.

Usage:
    client = PostgresClient(build_conninfo(ConnectionDefaults.from_env()))
    client.query("SELECT * FROM account WHERE id = $1", [7])
"""

from typing import Any, List, Optional, Sequence

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row

from dbx.config import ConnectionDefaults
from dbx.logging import ComponentType, get_logger
from drivers.base import ExecuteResult, Row

logger = get_logger(__name__, ComponentType.DRIVER)


def build_conninfo(config: ConnectionDefaults) -> str:
    """Build a libpq connection string from connection defaults."""
    params = {
        "host": config.host,
        "port": config.port_for("postgres"),
        "user": config.username,
        "password": config.password,
        "dbname": config.database,
    }
    return make_conninfo(**{key: value for key, value in params.items() if value is not None})


class PostgresClient:
    """
    DatabaseClient over a single psycopg connection.
    """

    def __init__(self, conninfo: str = "", connection: Optional[psycopg.Connection] = None):
        """
        Open (or adopt) a connection.

        Args:
            conninfo: libpq connection string
            connection: Already open connection to use instead
        """
        if connection is None:
            logger.debug("Connecting to PostgreSQL...")
            connection = psycopg.connect(
                conninfo,
                autocommit=True,
                row_factory=dict_row,
                cursor_factory=psycopg.RawCursor,
            )
            logger.debug("PostgreSQL connection established")
        self.connection = connection

    def execute(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> ExecuteResult:
        """Run a statement; the first column of a RETURNING row is the insert id."""
        with self.connection.cursor() as cur:
            cur.execute(sql, list(parameters) if parameters else None)
            last_insert_id = None
            if cur.description:
                row = cur.fetchone()
                if row:
                    last_insert_id = next(iter(row.values()))
            return ExecuteResult(affected_rows=max(cur.rowcount, 0), last_insert_id=last_insert_id)

    def query(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> List[Row]:
        """Run a query and fetch all rows."""
        with self.connection.cursor() as cur:
            cur.execute(sql, list(parameters) if parameters else None)
            return cur.fetchall() if cur.description else []

    def close(self) -> None:
        self.connection.close()


__all__ = [
    "PostgresClient",
    "build_conninfo",
]
