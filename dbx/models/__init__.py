# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Core - Schema value objects
# PURPOSE: Export the table description models
# CREATED: 17 OCT 2026
# ============================================================================

from dbx.models.schema import (
    Column,
    Index,
    Relation,
    CheckConstraint,
    Constraint,
    Schema,
)

__all__ = [
    "Column",
    "Index",
    "Relation",
    "CheckConstraint",
    "Constraint",
    "Schema",
]
