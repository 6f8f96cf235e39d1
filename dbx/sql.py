# ============================================================================
# SQL COMPOSITION
# ============================================================================
# STATUS: Core - Fragment builder shared by the DDL and condition compilers
# PURPOSE: Compose SQL from typed parts and render once against a dialect
# CREATED: 17 OCT 2026
# EXPORTS: Composable, SQL, Identifier, Literal, Placeholder, Composed,
#          quote_literal
# DEPENDENCIES: none
# ============================================================================
"""
SQL Composition.

Same shape as ``psycopg.sql`` (SQL / Identifier / Literal / Placeholder /
Composed with ``format`` and ``join``), but rendering is dialect-aware and
needs no connection: identifiers are quoted with the profile's quote
character, literals are rendered inline, placeholders always render as ``?``
(the binder turns them into ``$n`` for PostgreSQL).

Quoting rules live here and nowhere else.

Usage:
    from dbx.sql import SQL, Identifier, Placeholder

    expr = SQL("{column} {op} {value}").format(
        column=Identifier("email"),
        op=SQL("="),
        value=Placeholder(),
    )
    expr.render(profile)   # "email = ?"
"""

import json
import re
import string
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, List, Optional

_formatter = string.Formatter()

# Identifiers that never need quoting
_BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


def quote_identifier(name: str, quote: str = '"') -> str:
    """
    Quote an identifier only when it is not a plain word.

    Args:
        name: Identifier (column, table, index name)
        quote: Dialect quote character

    Returns:
        Identifier safe to embed in SQL text
    """
    if _BARE_IDENTIFIER.match(name):
        return name
    return quote + name.replace(quote, quote * 2) + quote


def quote_literal(value: Any) -> str:
    """
    Render a Python value as an inline SQL literal.

    Args:
        value: None, bool, number, str, date/datetime, dict or list

    Returns:
        SQL literal text
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return _quote_string(value.isoformat(sep=" "))
    if isinstance(value, (date, time)):
        return _quote_string(value.isoformat())
    if isinstance(value, (dict, list, tuple)):
        return _quote_string(json.dumps(value, separators=(",", ":"), default=str))
    return _quote_string(str(value))


def _quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


# ============================================================================
# COMPOSABLES
# ============================================================================

class Composable(ABC):
    """Base for all SQL parts."""

    @abstractmethod
    def render(self, profile=None) -> str:
        """Render to SQL text for a dialect profile."""

    def __add__(self, other: "Composable") -> "Composed":
        if isinstance(other, Composed):
            return Composed([self, *other.parts])
        if isinstance(other, Composable):
            return Composed([self, other])
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self), self._key()))

    def _key(self):
        return id(self)


class SQL(Composable):
    """
    Verbatim SQL text.

    Raw SQL supplied by callers (``$sql`` conditions, check expressions,
    generated-column expressions) is wrapped in this class unchanged: it is
    trusted and never escaped.
    """

    def __init__(self, text: str):
        if not isinstance(text, str):
            raise TypeError(f"SQL values must be strings, got {type(text).__name__}")
        self.text = text

    def render(self, profile=None) -> str:
        return self.text

    def format(self, *args: Composable, **kwargs: Composable) -> "Composed":
        """
        Merge composables into the text's ``{}`` / ``{name}`` slots.

        Raises:
            TypeError: If an argument is not a Composable
            ValueError: If the text mixes auto and manual numbering or uses format specs
        """
        parts: List[Composable] = []
        autonum: Optional[int] = 0
        for prefix, name, spec, conversion in _formatter.parse(self.text):
            if spec or conversion:
                raise ValueError("format specifiers and conversions are not supported")
            if prefix:
                parts.append(SQL(prefix))
            if name is None:
                continue
            if name.isdigit():
                autonum = None
                value = args[int(name)]
            elif not name:
                if autonum is None:
                    raise ValueError("cannot switch from manual to automatic field numbering")
                value = args[autonum]
                autonum += 1
            else:
                value = kwargs[name]
            if not isinstance(value, Composable):
                raise TypeError(f"format arguments must be Composable, got {type(value).__name__}")
            parts.append(value)
        return Composed(parts)

    def join(self, seq: Iterable[Composable]) -> "Composed":
        """Join a sequence of composables with this text as separator."""
        parts: List[Composable] = []
        for i, item in enumerate(seq):
            if i:
                parts.append(self)
            parts.append(item)
        return Composed(parts)

    def _key(self):
        return self.text

    def __repr__(self) -> str:
        return f"SQL({self.text!r})"


class Identifier(Composable):
    """A column, table or index name. Dotted paths are given as several strings."""

    def __init__(self, *names: str):
        if not names:
            raise TypeError("Identifier requires at least one name")
        for name in names:
            if not isinstance(name, str) or not name:
                raise TypeError(f"Identifier names must be non-empty strings, got {name!r}")
        self.names = names

    def render(self, profile=None) -> str:
        quote = profile.identifier_quote if profile is not None else '"'
        return ".".join(quote_identifier(n, quote) for n in self.names)

    def _key(self):
        return self.names

    def __repr__(self) -> str:
        return f"Identifier({', '.join(map(repr, self.names))})"


class Literal(Composable):
    """A value rendered inline (DDL defaults and bounds, never user filter input)."""

    def __init__(self, value: Any):
        self.value = value

    def render(self, profile=None) -> str:
        return quote_literal(self.value)

    def _key(self):
        return repr(self.value)

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class Placeholder(Composable):
    """A positional parameter marker. Always ``?`` until renumbered."""

    def render(self, profile=None) -> str:
        return "?"

    def _key(self):
        return "?"

    def __repr__(self) -> str:
        return "Placeholder()"


class Composed(Composable):
    """An ordered sequence of composables rendered back to back."""

    def __init__(self, parts: Iterable[Composable]):
        self.parts: List[Composable] = []
        for part in parts:
            if not isinstance(part, Composable):
                raise TypeError(f"Composed elements must be Composable, got {type(part).__name__}")
            self.parts.append(part)

    def render(self, profile=None) -> str:
        return "".join(part.render(profile) for part in self.parts)

    def join(self, joiner) -> "Composed":
        """Join the parts with a separator (str or SQL)."""
        if isinstance(joiner, str):
            joiner = SQL(joiner)
        return joiner.join(self.parts)

    def __add__(self, other: Composable) -> "Composed":
        if isinstance(other, Composed):
            return Composed([*self.parts, *other.parts])
        if isinstance(other, Composable):
            return Composed([*self.parts, other])
        return NotImplemented

    def __iter__(self):
        return iter(self.parts)

    def _key(self):
        return tuple(self.parts)

    def __repr__(self) -> str:
        return f"Composed({self.parts!r})"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Composable",
    "SQL",
    "Identifier",
    "Literal",
    "Placeholder",
    "Composed",
    "quote_identifier",
    "quote_literal",
]
