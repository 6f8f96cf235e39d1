# ============================================================================
# COMPILER ERRORS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Typed failures for schema, dialect, condition and binding errors
# CREATED: 17 OCT 2026
# EXPORTS: CompilerError, SchemaError, DialectError, ConditionError,
#          MissingParameterError
# ============================================================================
"""
Compiler Errors

Every compile-time failure is raised before any SQL is produced, so callers
never see partially rendered output. Filesystem errors from the freshness
tracker are not wrapped; they reach the caller as raised by the OS layer.
"""

from typing import Any, Optional


class CompilerError(Exception):
    """Base exception for compiler operations."""

    def __init__(self, message: str, operation: str = None, detail: Any = None):
        self.operation = operation
        self.detail = detail
        super().__init__(message)


class SchemaError(CompilerError):
    """Raised when a schema is invalid (unknown type, dangling reference, missing $id)."""

    def __init__(self, message: str, table: Optional[str] = None, field: str = None):
        self.table = table
        self.field = field
        super().__init__(message, operation="schema", detail=field)


class DialectError(CompilerError, ValueError):
    """Raised when a dialect name is not one of the supported backends."""

    def __init__(self, dialect: Any):
        self.dialect = dialect
        super().__init__(f"Unknown dialect '{dialect}'", operation="dialect", detail=dialect)


class ConditionError(CompilerError):
    """Raised when a filter condition has a malformed shape."""

    def __init__(self, message: str, column: str = None, value: Any = None):
        self.column = column
        self.value = value
        super().__init__(message, operation="condition", detail=column)


class MissingParameterError(CompilerError, KeyError):
    """Raised when a SQL template references a named parameter that was not supplied."""

    def __init__(self, name: str, available):
        self.name = name
        self.available = sorted(available)
        super().__init__(
            f"Parameter ':{name}' is not present in parameters {self.available}",
            operation="bind",
            detail=name,
        )

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]


__all__ = [
    "CompilerError",
    "SchemaError",
    "DialectError",
    "ConditionError",
    "MissingParameterError",
]
