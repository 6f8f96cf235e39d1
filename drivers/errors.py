# ============================================================================
# DRIVER ERRORS
# ============================================================================
# STATUS: Drivers - Error taxonomy of the adapter layer
# PURPOSE: Wrap exceptions raised by database drivers
# CREATED: 17 OCT 2026
# EXPORTS: DriverError
# ============================================================================
"""
Driver Errors

Anything a driver raises while running a statement reaches callers as a
DriverError chained to the original exception. Compile-time errors
(SchemaError, ConditionError, MissingParameterError) are never wrapped.
"""

from typing import Optional


class DriverError(Exception):
    """Base exception for database adapter operations."""

    def __init__(self, message: str, operation: str = None, sql: Optional[str] = None):
        self.operation = operation
        self.sql = sql
        super().__init__(message)


__all__ = [
    "DriverError",
]
