# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - DDL generation and schema freshness
# PURPOSE: Compile schemas to DDL, generate schemas from class files
# CREATED: 17 OCT 2026
# ============================================================================

from dbx.schema.ddl_utils import (
    IndexBuilder,
    ConstraintBuilder,
    CommentBuilder,
)
from dbx.schema.ddl_compiler import (
    SchemaToSQL,
    compile_create_table,
    compile_statements,
)
from dbx.schema.freshness import (
    BASE_COLUMNS,
    content_etag,
    is_outdated,
    outdated_schemas,
    enhance_schema,
    generate_schemas,
    load_schemas,
    ensure_schemas,
)
from dbx.schema.pydantic_source import PydanticSchemaGenerator

__all__ = [
    # Compiler
    "SchemaToSQL",
    "compile_create_table",
    "compile_statements",
    # Builders
    "IndexBuilder",
    "ConstraintBuilder",
    "CommentBuilder",
    # Freshness
    "BASE_COLUMNS",
    "content_etag",
    "is_outdated",
    "outdated_schemas",
    "enhance_schema",
    "generate_schemas",
    "load_schemas",
    "ensure_schemas",
    # Generator
    "PydanticSchemaGenerator",
]
