# ============================================================================
# PARAMETER BINDER TESTS
# ============================================================================
# STATUS: Tests - Named binding and positional renumbering
# PURPOSE: Placeholder rewriting, argument order, literal handling
# CREATED: 17 OCT 2026
# ============================================================================
"""
Parameter Binder Tests

Run with:
    pytest tests/test_binder.py -v
"""

import pytest

from dbx.errors import CompilerError, MissingParameterError
from dbx.query import bind_named, renumber_positional, strip_null_ordering


# ============================================================================
# NAMED BINDING
# ============================================================================

class TestBindNamed:
    """:name -> ? rewriting."""

    def test_repeated_name_emits_value_again(self):
        assert bind_named("WHERE a = :a AND b = :a", {"a": 5}) == ("WHERE a = ? AND b = ?", [5, 5])

    def test_occurrence_order(self):
        sql, args = bind_named("x = :second OR y = :first", {"first": 1, "second": 2})
        assert sql == "x = ? OR y = ?"
        assert args == [2, 1]

    def test_list_expands(self):
        sql, args = bind_named("id IN (:ids) AND n = :n", {"ids": [1, 2, 3], "n": "x"})
        assert sql == "id IN (?,?,?) AND n = ?"
        assert args == [1, 2, 3, "x"]

    def test_empty_list_renders_null(self):
        assert bind_named("id IN (:ids)", {"ids": []}) == ("id IN (NULL)", [])

    def test_unused_names_ignored(self):
        assert bind_named("a = :a", {"a": 1, "b": 2}) == ("a = ?", [1])

    def test_missing_name_strict(self):
        with pytest.raises(MissingParameterError) as exc_info:
            bind_named("a = :a AND b = :b", {"a": 1})
        assert exc_info.value.name == "b"
        assert "':b'" in str(exc_info.value)

    def test_missing_parameter_is_key_and_compiler_error(self):
        with pytest.raises(KeyError):
            bind_named(":x", {})
        with pytest.raises(CompilerError):
            bind_named(":x", {})

    def test_missing_name_permissive(self):
        assert bind_named("a = :a AND b = :b", {"a": 1}, strict=False) == ("a = ? AND b = ?", [1, None])

    def test_idempotent(self):
        params = {"a": [1, 2]}
        assert bind_named("a IN (:a)", params) == bind_named("a IN (:a)", params)
        assert params == {"a": [1, 2]}

    def test_string_literals_untouched(self):
        sql, args = bind_named("t = '10:30' AND s = 'it''s :x' AND n = :n", {"n": 1})
        assert sql == "t = '10:30' AND s = 'it''s :x' AND n = ?"
        assert args == [1]

    def test_postgres_cast_untouched(self):
        assert bind_named("a::text = :a", {"a": "x"}) == ("a::text = ?", ["x"])

    def test_positional_marks_kept(self):
        assert bind_named("a = ? AND b = :b", {"b": 2}) == ("a = ? AND b = ?", [2])


# ============================================================================
# RENUMBERING
# ============================================================================

class TestRenumberPositional:
    """? -> $n for PostgreSQL."""

    def test_renumber(self):
        assert renumber_positional("a = ? AND b = ?") == "a = $1 AND b = $2"

    def test_literals_untouched(self):
        assert renumber_positional("a = '?' AND b = ?") == "a = '?' AND b = $1"

    def test_strips_null_ordering(self):
        assert renumber_positional("SELECT * FROM t WHERE a = ? ORDER BY NULL") == "SELECT * FROM t WHERE a = $1"

    def test_keeps_real_ordering(self):
        assert renumber_positional("SELECT a FROM t ORDER BY a") == "SELECT a FROM t ORDER BY a"

    def test_no_placeholders(self):
        assert renumber_positional("SELECT 1") == "SELECT 1"


class TestStripNullOrdering:

    def test_strip(self):
        assert strip_null_ordering("SELECT a FROM t ORDER BY NULL LIMIT 5") == "SELECT a FROM t LIMIT 5"

    def test_column_named_null_like(self):
        assert strip_null_ordering("ORDER BY NULLS_FIRST") == "ORDER BY NULLS_FIRST"
