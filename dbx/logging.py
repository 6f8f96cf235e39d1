# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Context-aware loggers for compiler stages and drivers
# PURPOSE: Attach table/dialect/operation fields to every dbx log record
# CREATED: 17 OCT 2026
# ============================================================================
"""
Structured Logging

dbx is a library: it never installs handlers or formatters. Each module asks
``get_logger`` for a ``ContextLogger`` and wraps units of work in
``log_context``. Every record emitted inside the block carries two extra
attributes the host application's formatter can read:

- ``record.component``: the ComponentType value of the emitting module
- ``record.dbx``: dict of the active context (table, dialect, schema_id,
  operation, plus any ``extra`` fields)

Usage:
    from dbx.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.DDL)

    with log_context(table="account", dialect="postgres", operation="create_table"):
        logger.debug("Compiling table")
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Iterator, Optional


class ComponentType(str, Enum):
    """Which compiler stage a logger belongs to."""
    DDL = "ddl"
    CONDITION = "condition"
    BINDER = "binder"
    FRESHNESS = "freshness"
    DRIVER = "driver"


@dataclass(frozen=True)
class LogContext:
    """Fields describing the unit of work in progress on this thread."""
    table: Optional[str] = None
    dialect: Optional[str] = None
    schema_id: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only; ``extra`` entries are flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()


def _stack() -> list:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost active context, or an empty one."""
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(
    *,
    extra: Optional[Dict[str, Any]] = None,
    **fields_: Optional[str],
) -> Iterator[LogContext]:
    """
    Push a context for the duration of the block.

    Unspecified fields are inherited from the enclosing context and
    ``extra`` is merged over the parent's.

    Example:
        with log_context(table="account"):
            with log_context(operation="is_outdated"):
                ...  # records carry table and operation
    """
    parent = get_current_context()
    context = replace(parent, **fields_, extra={**parent.extra, **(extra or {})})
    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


class ContextLogger(logging.LoggerAdapter):
    """Adapter that stamps ``component`` and ``dbx`` onto each record."""

    def process(self, msg, kwargs):
        record_extra = dict(kwargs.get("extra") or {})
        record_extra["component"] = self.extra.get("component")
        record_extra["dbx"] = get_current_context().to_dict()
        kwargs["extra"] = record_extra
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name, normally ``__name__``
        component: Compiler stage the module belongs to
    """
    value = component.value if isinstance(component, ComponentType) else component
    return ContextLogger(logging.getLogger(name), {"component": value})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "ContextLogger",
    "get_logger",
    "get_current_context",
    "log_context",
]
