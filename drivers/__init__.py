# ============================================================================
# DRIVERS MODULE
# ============================================================================
# STATUS: Drivers - Adapters that execute compiled SQL
# PURPOSE: Export the client contract, adapters and Database facade
# CREATED: 17 OCT 2026
# ============================================================================

from drivers.base import DatabaseClient, ExecuteResult, Row
from drivers.errors import DriverError
from drivers.postgresql import PostgresClient, build_conninfo
from drivers.sqlite import SQLiteClient
from drivers.database import Database, connect, clean_sql

__all__ = [
    # Contract
    "DatabaseClient",
    "ExecuteResult",
    "Row",
    "DriverError",
    # Adapters
    "PostgresClient",
    "SQLiteClient",
    "build_conninfo",
    # Facade
    "Database",
    "connect",
    "clean_sql",
]
