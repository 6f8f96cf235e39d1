# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared by every compiler stage
# PURPOSE: Closed vocabularies for dialects, column types and filter operators
# CREATED: 17 OCT 2026
# EXPORTS: Dialect, ColumnType, DateOn, RelationType, Operator
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema and query compiler.

Every value that crosses a compile call boundary as a "name" (the dialect
selector, a column type, a predicate operator) is one of these enums. They
subclass ``str`` so raw JSON schemas and filter trees can use plain strings.
"""

from enum import Enum
from typing import Optional


# ============================================================================
# DIALECTS
# ============================================================================

class Dialect(str, Enum):
    """
    Supported SQL backends.

    The compiler never auto-detects a dialect; one of these is passed to
    every compile call.
    """
    MYSQL = "mysql"              # MySQL / MariaDB family
    POSTGRES = "postgres"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, value: "str | Dialect") -> Optional["Dialect"]:
        """Resolve a dialect name (case-insensitive), None when unknown."""
        if isinstance(value, Dialect):
            return value
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        name = _DIALECT_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None


_DIALECT_ALIASES = {
    "mariadb": "mysql",
    "postgresql": "postgres",
    "pg": "postgres",
    "sqlite3": "sqlite",
}


# ============================================================================
# SCHEMA VOCABULARY
# ============================================================================

class ColumnType(str, Enum):
    """Abstract column types understood by the DDL compiler."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    DATE = "date"
    OBJECT = "object"            # JSON object
    ARRAY = "array"              # JSON array

    def is_json(self) -> bool:
        """Check if values of this type are stored as JSON documents."""
        return self in (ColumnType.OBJECT, ColumnType.ARRAY)


class DateOn(str, Enum):
    """Automatic timestamp behaviour of a date column."""
    INSERT = "insert"            # CURRENT_TIMESTAMP default
    UPDATE = "update"            # CURRENT_TIMESTAMP default, refreshed on update


class RelationType(str, Enum):
    """Relation multiplicity. Informational only, DDL emits the foreign key."""
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


# ============================================================================
# FILTER OPERATORS
# ============================================================================

class Operator(str, Enum):
    """
    Predicate operators of a filter condition.

    ``sql`` is the comparison spelling for the operators that compile to a
    plain ``column <op> ?`` expression.
    """
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    BETWEEN = "between"
    CONTAINS = "contains"
    MATCH = "match"
    REGEX = "regex"

    @property
    def sql(self) -> str:
        return _OPERATOR_SQL[self]

    def explodes(self) -> bool:
        """Check if the operand is a list expanded into one placeholder per element."""
        return self in (Operator.IN, Operator.NIN)


_OPERATOR_SQL = {
    Operator.EQ: "=",
    Operator.NEQ: "!=",
    Operator.GT: ">",
    Operator.GTE: ">=",
    Operator.LT: "<",
    Operator.LTE: "<=",
    Operator.IN: "IN",
    Operator.NIN: "NOT IN",
    Operator.BETWEEN: "BETWEEN",
    Operator.CONTAINS: "MEMBER OF",
    Operator.MATCH: "MATCH",
    Operator.REGEX: "REGEXP",
}


__all__ = [
    "Dialect",
    "ColumnType",
    "DateOn",
    "RelationType",
    "Operator",
]
