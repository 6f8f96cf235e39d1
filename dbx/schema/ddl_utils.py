# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - DRY builders for SQL DDL generation
# PURPOSE: Index, constraint and comment builders on top of dbx.sql
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: IndexBuilder, ConstraintBuilder, CommentBuilder, referential_action
# DEPENDENCIES: dbx.sql
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

All builders return ``dbx.sql`` composables; the compiler renders them
against a dialect profile at the very end. Builders consult the profile for
spelling and feature flags and never branch on a dialect name.

Usage:
    from dbx.schema.ddl_utils import IndexBuilder

    stmt = IndexBuilder.standard("account", "Account", index, profile)
    stmt.render(profile)
    # CREATE INDEX account_inserted ON Account (inserted);
"""

from typing import List, Optional, Sequence

from dbx.config import CompilerDefaults
from dbx.dialects import DialectProfile
from dbx.models.schema import CheckConstraint, Column, Index, Relation
from dbx.sql import SQL, Composable, Composed, Identifier, Literal


def referential_action(action: str) -> str:
    """``set-null`` -> ``SET NULL``."""
    return action.upper().replace("-", " ").replace("_", " ").strip()


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Builder for standalone index statements.

    All methods are static and return Composed statements ending in ``;``.
    """

    @staticmethod
    def _generate_index_name(prefix: str, columns: Sequence[str], suffix: str = "") -> str:
        """Generate conventional index name: <table>_<col1>_<col2>."""
        name = f"{prefix}_{'_'.join(columns)}"
        if suffix:
            name = f"{name}_{suffix}"
        return name

    @staticmethod
    def _column_list(index: Index, profile: DialectProfile, subtype: str) -> Composed:
        parts: List[Composable] = []
        for position, column in enumerate(index.properties):
            if position == index.array:
                # Multi-valued members are indexed through a CAST of the array
                parts.append(SQL("(CAST({} AS {}{}))").format(
                    Identifier(column),
                    SQL(index.sub_type or subtype),
                    SQL(profile.array_cast_suffix),
                ))
            else:
                parts.append(Identifier(column))
        return SQL(",").join(parts)

    @staticmethod
    def standard(
        prefix: str,
        table: str,
        index: Index,
        profile: DialectProfile,
        defaults: Optional[CompilerDefaults] = None,
    ) -> Composed:
        """
        Create a (unique) B-tree index.

        Args:
            prefix: Object-name prefix (lowercased table name)
            table: Table the index belongs to
            index: Index definition
            profile: Target dialect
            defaults: Compiler defaults (array cast subtype)

        Returns:
            Composed CREATE INDEX statement
        """
        defaults = defaults or CompilerDefaults()
        name = index.name or IndexBuilder._generate_index_name(prefix, index.properties)

        return SQL("CREATE {unique}INDEX {name} ON {table} ({columns});").format(
            unique=SQL("UNIQUE " if index.unique else ""),
            name=Identifier(name),
            table=Identifier(table),
            columns=IndexBuilder._column_list(index, profile, defaults.array_subtype),
        )

    @staticmethod
    def fulltext_columns(columns: Sequence[str], profile: DialectProfile) -> Composed:
        """Column expression shared by the full-text index and MATCH predicates."""
        if profile.fulltext_coalesce:
            return SQL("||' '||").join(
                SQL("COALESCE({},'')").format(Identifier(c)) for c in columns
            )
        return SQL(",").join(Identifier(c) for c in columns)

    @staticmethod
    def fulltext(
        prefix: str,
        table: str,
        columns: Sequence[str],
        profile: DialectProfile,
        defaults: Optional[CompilerDefaults] = None,
    ) -> Optional[Composed]:
        """
        Create the full-text index over the listed columns.

        Returns:
            Composed statement, or None when the dialect has no full-text index
        """
        if not columns or profile.fulltext_index is None:
            return None
        defaults = defaults or CompilerDefaults()

        stmt = SQL(profile.fulltext_index).format(
            name=Identifier(f"{prefix}_{defaults.fulltext_index_suffix}"),
            table=Identifier(table),
            columns=IndexBuilder.fulltext_columns(columns, profile),
            language=Literal(defaults.fulltext_language),
        )
        return stmt + SQL(";")


# ============================================================================
# CONSTRAINT BUILDER
# ============================================================================

class ConstraintBuilder:
    """
    Builder for table-body constraint clauses (no trailing comma).
    """

    @staticmethod
    def foreign_key(prefix: str, name: str, relation: Relation) -> Composed:
        """
        Named foreign key to ``target(id)``.
        """
        stmt = SQL("CONSTRAINT {name} FOREIGN KEY ({column}) REFERENCES {target} (id)").format(
            name=Identifier(f"{prefix}_{name}"),
            column=Identifier(relation.join),
            target=Identifier(relation.target),
        )
        if relation.delete:
            stmt += SQL(f" ON DELETE {referential_action(relation.delete)}")
        if relation.update:
            stmt += SQL(f" ON UPDATE {referential_action(relation.update)}")
        return stmt

    @staticmethod
    def check(
        name: Optional[str],
        expression: Composable,
        profile: DialectProfile,
        enforced: Optional[bool] = None,
    ) -> Composed:
        """
        CHECK clause, named when the dialect allows it.
        """
        if name and profile.supports_named_checks:
            stmt = SQL("CONSTRAINT {} CHECK ({})").format(Identifier(name), expression)
        else:
            stmt = SQL("CHECK ({})").format(expression)
        if enforced is False and profile.supports_not_enforced:
            stmt += SQL(" NOT ENFORCED")
        return stmt

    @staticmethod
    def column_expression(name: str, column: Column) -> Optional[Composable]:
        """
        Boolean expression for a column's inline constraint or bounds.

        An explicit ``constraint`` wins over the inclusive and exclusive bounds.
        """
        if column.constraint:
            return SQL(column.constraint)

        bounds: List[Composable] = []
        if column.minimum is not None:
            bounds.append(SQL("{} >= {}").format(Identifier(name), Literal(column.minimum)))
        if column.exclusive_minimum is not None:
            bounds.append(SQL("{} > {}").format(Identifier(name), Literal(column.exclusive_minimum)))
        if column.maximum is not None:
            bounds.append(SQL("{} <= {}").format(Identifier(name), Literal(column.maximum)))
        if column.exclusive_maximum is not None:
            bounds.append(SQL("{} < {}").format(Identifier(name), Literal(column.exclusive_maximum)))
        if not bounds:
            return None
        return SQL(" AND ").join(bounds)

    @staticmethod
    def independent(prefix: str, constraint, profile: DialectProfile) -> Composed:
        """Table-level constraint: a bare expression or a CheckConstraint."""
        if isinstance(constraint, CheckConstraint):
            name = f"{prefix}_{constraint.name}".lower() if constraint.name else None
            return ConstraintBuilder.check(name, SQL(constraint.check), profile, constraint.enforced)
        return ConstraintBuilder.check(None, SQL(constraint), profile)


# ============================================================================
# COMMENT BUILDER
# ============================================================================

class CommentBuilder:
    """
    Builder for inline column comments.
    """

    @staticmethod
    def column(description: Optional[str], profile: DialectProfile) -> Composable:
        """`` COMMENT '<description>'`` where supported, otherwise nothing."""
        if not description or not profile.supports_column_comments:
            return SQL("")
        return SQL(" COMMENT ") + Literal(description)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "IndexBuilder",
    "ConstraintBuilder",
    "CommentBuilder",
    "referential_action",
]
