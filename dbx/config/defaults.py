# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for DDL rendering, connections and freshness
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the compiler and the thin driver adapters.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CompilerDefaults:
    """
    Defaults for DDL and condition rendering.

    Controls column padding, implicit string widths and full-text naming.
    """
    # Layout
    pad_width: int = 4  # indentation of column lines inside CREATE TABLE

    # Types
    default_string_length: int = 128  # VARCHAR width when maxLength is absent
    array_subtype: str = "CHAR(32)"  # CAST target of multi-valued index members

    # Full text
    fulltext_language: str = "english"
    fulltext_index_suffix: str = "fulltext"

    @classmethod
    def from_env(cls) -> "CompilerDefaults":
        """Create from environment variables."""
        return cls(
            pad_width=int(os.getenv("DBX_PAD_WIDTH", 4)),
            default_string_length=int(os.getenv("DBX_DEFAULT_STRING_LENGTH", 128)),
            array_subtype=os.getenv("DBX_ARRAY_SUBTYPE", "CHAR(32)"),
            fulltext_language=os.getenv("DBX_FULLTEXT_LANGUAGE", "english"),
        )


@dataclass(frozen=True)
class ConnectionDefaults:
    """
    Defaults for driver adapters.

    Mirrors the DB_* variables used by the deployment scripts.
    """
    host: str = "127.0.0.1"
    port: Optional[int] = None  # resolved per dialect when None
    username: str = "primary"
    password: Optional[str] = None
    database: Optional[str] = None
    sqlite_file: str = ":memory:"

    # Default ports by dialect
    mysql_port: int = 3306
    postgres_port: int = 5432

    def port_for(self, dialect: str) -> int:
        """Determine the port for a dialect when none was configured."""
        if self.port:
            return self.port
        if dialect == "postgres":
            return self.postgres_port
        return self.mysql_port

    @classmethod
    def from_env(cls) -> "ConnectionDefaults":
        """Create from environment variables."""
        port = os.getenv("DB_PORT")
        return cls(
            host=os.getenv("DB_HOST", "127.0.0.1"),
            port=int(port) if port else None,
            username=os.getenv("DB_USER", "primary"),
            password=os.getenv("DB_PASS"),
            database=os.getenv("DB_NAME"),
            sqlite_file=os.getenv("DB_FILE", ":memory:"),
        )


@dataclass(frozen=True)
class FreshnessDefaults:
    """
    Defaults for schema generation and freshness checks.
    """
    # Columns added by enhance_schema when missing
    base_columns: Tuple[str, ...] = ("id", "inserted", "updated")

    # Parallel freshness checks (None lets the executor decide)
    max_workers: Optional[int] = None

    @classmethod
    def from_env(cls) -> "FreshnessDefaults":
        """Create from environment variables."""
        workers = os.getenv("DBX_FRESHNESS_WORKERS")
        columns = os.getenv("DBX_BASE_COLUMNS")
        return cls(
            base_columns=tuple(c.strip() for c in columns.split(",")) if columns else ("id", "inserted", "updated"),
            max_workers=int(workers) if workers else None,
        )


# ============================================================================
# AGGREGATE ACCESS
# ============================================================================

@dataclass(frozen=True)
class Defaults:
    """All defaults in one place."""
    compiler: CompilerDefaults = field(default_factory=CompilerDefaults)
    connection: ConnectionDefaults = field(default_factory=ConnectionDefaults)
    freshness: FreshnessDefaults = field(default_factory=FreshnessDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create from environment variables."""
        return cls(
            compiler=CompilerDefaults.from_env(),
            connection=ConnectionDefaults.from_env(),
            freshness=FreshnessDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults(reload: bool = False) -> Defaults:
    """
    Get the process-wide defaults (read from the environment once).

    Args:
        reload: Re-read the environment

    Returns:
        Defaults instance
    """
    global _defaults
    if _defaults is None or reload:
        _defaults = Defaults.from_env()
    return _defaults
