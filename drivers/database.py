# ============================================================================
# DATABASE FACADE
# ============================================================================
# STATUS: Drivers - Entry point for running compiled SQL
# PURPOSE: Bind, renumber, log and execute statements through a client
# CREATED: 17 OCT 2026
# EXPORTS: Database, connect
# DEPENDENCIES: dbx, drivers.postgresql, drivers.sqlite
# ============================================================================
"""
Database Facade

Statements are written once, MySQL style, with ``?`` or ``:name``
parameters, and adapted per dialect just before they reach the client:

    1. named parameters are bound (``bind_named``)
    2. ``ORDER BY NULL`` is stripped where the dialect rejects it
    3. placeholders are renumbered to ``$n`` for PostgreSQL

Every statement is logged at DEBUG with its arguments inlined, followed by
``[N rows in T ms]``. Driver failures are logged at ERROR and re-raised as
DriverError.

Usage:
    db = connect({"type": "sqlite"})
    db.create_table(account_schema)
    rows = db.query("SELECT * FROM account WHERE name = :name", {"name": "Alice"})
"""

import logging
import re
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from dbx.config import ConnectionDefaults, get_defaults
from dbx.contracts import Dialect
from dbx.dialects import DialectProfile, get_profile
from dbx.errors import CompilerError, DialectError
from dbx.logging import ComponentType, get_logger, log_context
from dbx.query.binder import bind_named, renumber_positional, strip_null_ordering
from dbx.schema.ddl_compiler import SchemaLike, compile_statements
from dbx.sql import quote_literal
from drivers.base import DatabaseClient, ExecuteResult, Row
from drivers.errors import DriverError
from drivers.postgresql import PostgresClient, build_conninfo
from drivers.sqlite import SQLiteClient

logger = get_logger(__name__, ComponentType.DRIVER)

Parameters = Union[Sequence[Any], Mapping[str, Any], None]

_MARKER = re.compile(r"\?|\$\d+")
_WHITESPACE = re.compile(r"\s+")


def clean_sql(sql: str) -> str:
    """Collapse whitespace for single-line logging."""
    return _WHITESPACE.sub(" ", sql).strip()


class Database:
    """
    Runs SQL for one dialect through a DatabaseClient.
    """

    def __init__(self, client: DatabaseClient, dialect: Union[str, Dialect, DialectProfile]):
        self.client = client
        self.profile = get_profile(dialect)

    @property
    def dialect(self) -> Dialect:
        return self.profile.dialect

    # =========================================================================
    # STATEMENT PREPARATION
    # =========================================================================

    def prepare(self, sql: str, parameters: Parameters = None) -> Tuple[str, List[Any]]:
        """
        Adapt a statement and its parameters to the dialect.

        Returns:
            Tuple of (driver-ready SQL, positional arguments)

        Raises:
            MissingParameterError: If a named parameter is missing
        """
        if isinstance(parameters, Mapping):
            sql, arguments = bind_named(sql, parameters)
        else:
            arguments = list(parameters or [])

        if self.profile.placeholder_style == "numeric":
            sql = renumber_positional(sql)
        elif self.profile.strips_null_ordering:
            sql = strip_null_ordering(sql)
        return sql, arguments

    @staticmethod
    def _log_sql(sql: str, arguments: Sequence[Any], rows: int, started: float) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        remaining = iter(arguments)

        def inline(_match: re.Match) -> str:
            return quote_literal(next(remaining, "?"))

        elapsed = int((time.perf_counter() - started) * 1000)
        suffix = "row" if rows == 1 else "rows"
        logger.debug(f"{_MARKER.sub(inline, clean_sql(sql))}  [{rows} {suffix} in {elapsed}ms]")

    @contextmanager
    def _error_context(self, operation: str, sql: str, arguments: Sequence[Any]) -> Iterator[None]:
        """
        Wrap driver exceptions with the statement that failed.
        """
        try:
            yield
        except (DriverError, CompilerError):
            raise
        except Exception as e:
            statement = clean_sql(sql)
            logger.error(f"{operation} failed: {e} | {statement} | {list(arguments)}")
            raise DriverError(f"{operation} failed: {e}", operation=operation, sql=statement) from e

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def query(self, sql: str, parameters: Parameters = None) -> List[Row]:
        """
        Run a query and return its rows.

        Args:
            sql: Statement with ``?`` or ``:name`` parameters
            parameters: Positional list or named mapping
        """
        sql, arguments = self.prepare(sql, parameters)
        with log_context(dialect=self.profile.name, operation="query"):
            with self._error_context("query", sql, arguments):
                started = time.perf_counter()
                rows = self.client.query(sql, arguments)
            self._log_sql(sql, arguments, len(rows), started)
        return rows

    def execute(self, sql: str, parameters: Parameters = None) -> ExecuteResult:
        """
        Run a statement that returns no rows.

        Args:
            sql: Statement with ``?`` or ``:name`` parameters
            parameters: Positional list or named mapping
        """
        sql, arguments = self.prepare(sql, parameters)
        with log_context(dialect=self.profile.name, operation="execute"):
            with self._error_context("execute", sql, arguments):
                started = time.perf_counter()
                result = self.client.execute(sql, arguments)
            self._log_sql(sql, arguments, result.affected_rows, started)
        return result

    def create_table(
        self,
        schema: SchemaLike,
        execute: bool = True,
        table_name: Optional[str] = None,
    ) -> List[str]:
        """
        Compile a schema and run its statements one by one.

        Args:
            schema: Schema or its JSON mapping
            execute: Only compile when False
            table_name: Override of the schema's table name

        Returns:
            The compiled statements
        """
        statements = compile_statements(schema, self.profile, table_name)
        if execute:
            for statement in statements:
                self.execute(statement)
        return statements

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ============================================================================
# FACTORY
# ============================================================================

def connect(config: Optional[Mapping[str, Any]] = None) -> Database:
    """
    Open a Database for a configuration mapping.

    Keys: ``type`` (dialect, required), ``host``, ``port``, ``username``,
    ``password``, ``database``, ``filename`` (SQLite). Missing keys fall back
    to the DB_* environment defaults.

    Raises:
        DialectError: If ``type`` is not a supported dialect
        DriverError: For MySQL, which has no bundled client
    """
    config = dict(config or {})
    dialect = Dialect.parse(config.get("type", ""))
    if dialect is None:
        raise DialectError(config.get("type"))

    env = get_defaults().connection
    settings = ConnectionDefaults(
        host=config.get("host", env.host),
        port=config.get("port", env.port),
        username=config.get("username", env.username),
        password=config.get("password", env.password),
        database=config.get("database", env.database),
        sqlite_file=config.get("filename", env.sqlite_file),
    )

    if dialect == Dialect.SQLITE:
        return Database(SQLiteClient(settings.sqlite_file), dialect)
    if dialect == Dialect.POSTGRES:
        return Database(PostgresClient(build_conninfo(settings)), dialect)

    raise DriverError(
        f"No bundled client for {dialect.value}; wrap your driver in a DatabaseClient "
        f"and pass it to Database(client, '{dialect.value}')",
        operation="connect",
    )


__all__ = [
    "Database",
    "connect",
    "clean_sql",
]
