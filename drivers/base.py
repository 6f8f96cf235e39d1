# ============================================================================
# DATABASE CLIENT CONTRACT
# ============================================================================
# STATUS: Drivers - Boundary between the compiler and database drivers
# PURPOSE: Protocol every adapter implements
# CREATED: 17 OCT 2026
# EXPORTS: DatabaseClient, ExecuteResult, Row
# ============================================================================
"""
Database Client Contract.

Adapters receive SQL that is final for their driver: named parameters are
already bound, PostgreSQL placeholders are already ``$n``. They only run it.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

Row = Dict[str, Any]


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a statement that returns no rows."""
    affected_rows: int = 0
    last_insert_id: Optional[int] = None


@runtime_checkable
class DatabaseClient(Protocol):
    """One open connection to a database."""

    def execute(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> ExecuteResult:
        ...

    def query(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> List[Row]:
        ...

    def close(self) -> None:
        ...


__all__ = [
    "DatabaseClient",
    "ExecuteResult",
    "Row",
]
