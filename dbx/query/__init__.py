# ============================================================================
# QUERY MODULE
# ============================================================================
# STATUS: Core - Query-time SQL rendering
# PURPOSE: Condition compiler and parameter binder
# CREATED: 17 OCT 2026
# ============================================================================

# binder first: the schema package imports it while conditions loads
from dbx.query.binder import (
    bind_named,
    renumber_positional,
    strip_null_ordering,
)
from dbx.query.conditions import (
    ConditionCompiler,
    compile_where,
    compile_order,
)

__all__ = [
    "bind_named",
    "renumber_positional",
    "strip_null_ordering",
    "ConditionCompiler",
    "compile_where",
    "compile_order",
]
