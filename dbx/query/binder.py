# ============================================================================
# PARAMETER BINDER
# ============================================================================
# STATUS: Core - Placeholder style normalisation
# PURPOSE: Named (:name) to positional (?) binding and $n renumbering
# CREATED: 17 OCT 2026
# EXPORTS: bind_named, renumber_positional, strip_null_ordering
# DEPENDENCIES: none
# ============================================================================
"""
Parameter Binder.

Templates are written once with ``:name`` or ``?`` placeholders and adapted
to the driver at the last moment:

    bind_named("WHERE a = :a AND b IN (:ids)", {"a": 5, "ids": [1, 2]})
    # ("WHERE a = ? AND b IN (?,?)", [5, 1, 2])

    renumber_positional("a = ? AND b = ?")
    # "a = $1 AND b = $2"

Single-quoted string literals are copied untouched, and so is the ``::``
of a PostgreSQL cast, so ``'10:30'`` and ``x::text`` are never taken for
parameters.
"""

import re
from typing import Any, List, Mapping, Tuple

from dbx.errors import MissingParameterError
from dbx.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.BINDER)

# Literal, cast, or named parameter (first match wins at each position)
_NAMED_TOKEN = re.compile(r"'(?:[^']|'')*'|::|:([A-Za-z_$][A-Za-z0-9_$]*)")

# Literal or positional placeholder
_POSITIONAL_TOKEN = re.compile(r"'(?:[^']|'')*'|\?")

_NULL_ORDERING = re.compile(r"\s*\bORDER BY NULL\b")


def strip_null_ordering(sql: str) -> str:
    """
    Remove ``ORDER BY NULL`` (MySQL for "no ordering", invalid elsewhere).
    """
    return _NULL_ORDERING.sub("", sql)


def bind_named(
    sql: str,
    named: Mapping[str, Any],
    strict: bool = True,
) -> Tuple[str, List[Any]]:
    """
    Rewrite ``:name`` parameters into ``?`` placeholders.

    Each occurrence emits its value again, in left to right order. A list or
    tuple value expands into one ``?`` per element; an empty one renders
    ``NULL`` and binds nothing. Names in ``named`` that the template does not
    use are ignored.

    Args:
        sql: Template with ``:name`` parameters
        named: Parameter values by name
        strict: Raise on a missing name (otherwise bind None)

    Returns:
        Tuple of (sql with ``?`` placeholders, positional arguments)

    Raises:
        MissingParameterError: If a referenced name is absent and strict is set
    """
    arguments: List[Any] = []

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name is None:
            return match.group(0)

        if name not in named:
            if strict:
                raise MissingParameterError(name, named.keys())
            value = None
        else:
            value = named[name]

        if isinstance(value, (list, tuple)):
            arguments.extend(value)
            return ",".join("?" * len(value)) if value else "NULL"
        arguments.append(value)
        return "?"

    bound = _NAMED_TOKEN.sub(substitute, sql)
    logger.debug(f"Bound {len(arguments)} arguments from {len(named)} named parameters")
    return bound, arguments


def renumber_positional(sql: str) -> str:
    """
    Replace ``?`` placeholders with ``$1``, ``$2``... for PostgreSQL.

    ``ORDER BY NULL`` is stripped first.
    """
    counter = 0

    def number(match: re.Match) -> str:
        nonlocal counter
        if match.group(0) != "?":
            return match.group(0)
        counter += 1
        return f"${counter}"

    return _POSITIONAL_TOKEN.sub(number, strip_null_ordering(sql))


__all__ = [
    "bind_named",
    "renumber_positional",
    "strip_null_ordering",
]
