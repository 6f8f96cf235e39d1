# ============================================================================
# CONDITION COMPILER
# ============================================================================
# STATUS: Core - WHERE / ORDER BY rendering
# PURPOSE: Compile filter condition trees into parameterized SQL fragments
# CREATED: 17 OCT 2026
# EXPORTS: ConditionCompiler, compile_where, compile_order
# DEPENDENCIES: dbx.sql, dbx.dialects
# ============================================================================
"""
Condition Compiler.

A condition is a plain dict tree:

    {"name": "Alice"}                           name = ?
    {"age": {"gte": 18}}                        age >= ?
    {"deleted": None}                           deleted IS ?
    {"id": {"in": [1, 2, 3]}}                   id IN (?,?,?)
    {"or": [{"a": 1}, {"b": {"lt": 2}}]}        (a = ? OR b < ?)
    {"$sql": "score > 2 * bonus"}               (score > 2 * bonus)

Top-level keys are joined with AND. Values never reach the SQL text; they are
returned as an ordered argument list matching the ``?`` placeholders.

``$sql`` fragments are inserted verbatim inside parentheses, so each one is a
single conjunct. They are trusted input, exactly like string-concatenated SQL,
and must never carry end-user text.
"""

from collections.abc import Mapping as MappingABC
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from dbx.config import get_defaults
from dbx.contracts import Dialect, Operator
from dbx.dialects import DialectProfile, get_profile
from dbx.errors import ConditionError
from dbx.logging import ComponentType, get_logger
from dbx.schema.ddl_utils import IndexBuilder
from dbx.sql import SQL, Composable, Identifier, Literal, Placeholder

logger = get_logger(__name__, ComponentType.CONDITION)

RAW_SQL_KEY = "$sql"
COMBINATORS = {"and": " AND ", "or": " OR "}

_TRUE = SQL("TRUE")
_FALSE = SQL("FALSE")


def _column(name: str) -> Identifier:
    # Dotted names address a column of a joined table
    return Identifier(*name.split("."))


class ConditionCompiler:
    """
    Compile condition trees for one dialect.

    Stateless apart from the profile, so one instance can serve every thread.
    """

    def __init__(
        self,
        dialect: Union[str, Dialect, DialectProfile],
        full_text_columns: Optional[Sequence[str]] = None,
        language: Optional[str] = None,
    ):
        self.profile = get_profile(dialect)
        self.full_text_columns = list(full_text_columns or [])
        self.language = language or get_defaults().compiler.fulltext_language

    # =========================================================================
    # TREE
    # =========================================================================

    def compile(self, condition: Optional[Mapping[str, Any]]) -> Tuple[str, List[Any]]:
        """
        Compile a condition tree.

        Returns:
            Tuple of (boolean SQL expression, ordered arguments)

        Raises:
            ConditionError: If the tree is malformed
        """
        arguments: List[Any] = []
        expression = self._conjunction(condition, arguments)
        return expression.render(self.profile), arguments

    def _conjunction(self, condition: Optional[Mapping[str, Any]], arguments: List[Any]) -> Composable:
        if condition is None:
            return _TRUE
        if not isinstance(condition, MappingABC):
            raise ConditionError(
                f"Condition must be a mapping, got {type(condition).__name__}",
                value=condition,
            )

        parts: List[Composable] = []
        for key, value in condition.items():
            if key in COMBINATORS:
                parts.append(self._combinator(key, value, arguments))
            elif key == RAW_SQL_KEY:
                if not isinstance(value, str):
                    raise ConditionError("$sql must be a string", column=key, value=value)
                # One conjunct regardless of the operators inside it
                parts.append(SQL("({})").format(SQL(value)))
            else:
                part = self._predicate(key, value, arguments)
                if part is not None:
                    parts.append(part)

        if not parts:
            return _TRUE
        return SQL(" AND ").join(parts)

    def _combinator(self, key: str, children: Any, arguments: List[Any]) -> Composable:
        if not isinstance(children, (list, tuple)):
            raise ConditionError(f"'{key}' expects a list of conditions", column=key, value=children)
        if not children:
            return _TRUE

        rendered = [self._conjunction(child, arguments) for child in children]
        return SQL("({})").format(SQL(COMBINATORS[key]).join(rendered))

    # =========================================================================
    # PREDICATES
    # =========================================================================

    def _predicate(self, column: str, value: Any, arguments: List[Any]) -> Optional[Composable]:
        if not isinstance(value, MappingABC):
            return self._comparison(column, Operator.EQ, value, arguments)

        if not value:
            raise ConditionError(f"Empty predicate for column '{column}'", column=column)

        # Several operator keys collapse to the last one
        keys = list(value.keys())
        key = keys[-1]
        operator = self._operator(column, key)
        if len(keys) > 1:
            logger.debug(f"Predicate on '{column}' ignores operators {keys[:-1]}, using '{key}'")

        operand = value[key]
        if operator == Operator.MATCH:
            return self._match(column, operand, arguments)
        if operator == Operator.CONTAINS:
            return self._contains(column, operand, arguments)
        if operator.explodes():
            return self._membership(column, operator, operand, arguments)
        if operator == Operator.BETWEEN:
            return self._between(column, operand, arguments)
        if operator == Operator.REGEX:
            arguments.append(operand)
            return SQL("{} {} {}").format(_column(column), SQL(self.profile.regex_operator), Placeholder())
        return self._comparison(column, operator, operand, arguments)

    @staticmethod
    def _operator(column: str, key: Any) -> Operator:
        try:
            return Operator(key)
        except ValueError as e:
            raise ConditionError(
                f"Unknown operator '{key}' for column '{column}'",
                column=column,
                value=key,
            ) from e

    def _comparison(self, column: str, operator: Operator, operand: Any, arguments: List[Any]) -> Composable:
        op = operator.sql
        # NULL never compares equal
        if operand is None and operator == Operator.EQ:
            op = "IS"
        elif operand is None and operator == Operator.NEQ:
            op = "IS NOT"

        arguments.append(operand)
        return SQL("{} {} {}").format(_column(column), SQL(op), Placeholder())

    def _membership(self, column: str, operator: Operator, operand: Any, arguments: List[Any]) -> Composable:
        if isinstance(operand, (str, bytes)) or not isinstance(operand, (list, tuple, set, frozenset)):
            raise ConditionError(
                f"'{operator.value}' on column '{column}' expects a list",
                column=column,
                value=operand,
            )
        values = list(operand)
        if not values:
            return _FALSE if operator == Operator.IN else _TRUE

        arguments.extend(values)
        placeholders = SQL(",").join(Placeholder() for _ in values)
        return SQL("{} {} ({})").format(_column(column), SQL(operator.sql), placeholders)

    def _between(self, column: str, operand: Any, arguments: List[Any]) -> Composable:
        if not isinstance(operand, (list, tuple)) or len(operand) != 2:
            raise ConditionError(
                f"'between' on column '{column}' expects [low, high]",
                column=column,
                value=operand,
            )
        arguments.extend(operand)
        return SQL("{} BETWEEN {} AND {}").format(_column(column), Placeholder(), Placeholder())

    def _contains(self, column: str, operand: Any, arguments: List[Any]) -> Composable:
        profile = self.profile
        arguments.append(f"%{operand}%" if profile.contains_wraps_like else operand)
        return SQL(profile.contains_template).format(column=_column(column), value=Placeholder())

    def _match(self, column: str, operand: Any, arguments: List[Any]) -> Optional[Composable]:
        # Empty search terms drop the predicate
        if not operand:
            return None

        profile = self.profile
        if self.full_text_columns and profile.fulltext_match:
            arguments.append(f"{operand}{profile.fulltext_term_suffix}")
            return SQL(profile.fulltext_match).format(
                columns=IndexBuilder.fulltext_columns(self.full_text_columns, profile),
                term=Placeholder(),
                language=Literal(self.language),
            )

        arguments.append(f"%{operand}%")
        return SQL("{} LIKE {}").format(_column(column), Placeholder())


# ============================================================================
# FUNCTIONAL API
# ============================================================================

def compile_where(
    condition: Optional[Mapping[str, Any]],
    dialect: Union[str, Dialect, DialectProfile],
    full_text_columns: Optional[Sequence[str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Compile a condition tree into a WHERE fragment and its arguments.

    Args:
        condition: Condition tree (None or empty renders ``TRUE``)
        dialect: Target dialect
        full_text_columns: Columns of the table's full-text index

    Returns:
        Tuple of (SQL fragment, ordered arguments)

    Raises:
        DialectError: If the dialect is unknown
        ConditionError: If the tree is malformed
    """
    return ConditionCompiler(dialect, full_text_columns).compile(condition)


def compile_order(
    order: Optional[Mapping[str, str]],
    dialect: Union[str, Dialect, DialectProfile, None] = None,
) -> str:
    """
    Compile ``{"column": "DESC" | "ASC"}`` into an ORDER BY list.

    Anything but ``DESC`` sorts ascending. An empty order renders ``NULL`` so
    callers can always write ``ORDER BY ...``; the binder strips
    ``ORDER BY NULL`` for dialects that reject it.
    """
    if not order:
        return "NULL"
    profile = get_profile(dialect) if dialect is not None else None
    parts = []
    for name, direction in order.items():
        suffix = "DESC" if str(direction).upper() == "DESC" else "ASC"
        parts.append(f"{_column(name).render(profile)} {suffix}")
    return ", ".join(parts)


__all__ = [
    "ConditionCompiler",
    "compile_where",
    "compile_order",
]
