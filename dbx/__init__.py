# ============================================================================
# DBX - CROSS-DIALECT SCHEMA AND QUERY COMPILER
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export the compiler entry points, models and errors
# CREATED: 17 OCT 2026
# ============================================================================

from dbx.__version__ import __version__
from dbx.contracts import ColumnType, DateOn, Dialect, Operator, RelationType
from dbx.errors import (
    CompilerError,
    SchemaError,
    DialectError,
    ConditionError,
    MissingParameterError,
)
from dbx.models import Column, Index, Relation, CheckConstraint, Schema
from dbx.dialects import DialectProfile, PROFILES, get_profile
from dbx.query import (
    bind_named,
    renumber_positional,
    strip_null_ordering,
    compile_where,
    compile_order,
)
from dbx.schema import (
    SchemaToSQL,
    compile_create_table,
    compile_statements,
    is_outdated,
    outdated_schemas,
    generate_schemas,
    ensure_schemas,
    enhance_schema,
    PydanticSchemaGenerator,
)

__all__ = [
    "__version__",
    # Enums
    "ColumnType",
    "DateOn",
    "Dialect",
    "Operator",
    "RelationType",
    # Errors
    "CompilerError",
    "SchemaError",
    "DialectError",
    "ConditionError",
    "MissingParameterError",
    # Models
    "Column",
    "Index",
    "Relation",
    "CheckConstraint",
    "Schema",
    # Dialects
    "DialectProfile",
    "PROFILES",
    "get_profile",
    # Query
    "bind_named",
    "renumber_positional",
    "strip_null_ordering",
    "compile_where",
    "compile_order",
    # Schema
    "SchemaToSQL",
    "compile_create_table",
    "compile_statements",
    "is_outdated",
    "outdated_schemas",
    "generate_schemas",
    "ensure_schemas",
    "enhance_schema",
    "PydanticSchemaGenerator",
]
