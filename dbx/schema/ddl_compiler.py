# ============================================================================
# SCHEMA TO SQL COMPILER
# ============================================================================
# STATUS: Core - DDL generation from Schema values
# PURPOSE: Render CREATE TABLE / INDEX statements for one dialect
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: SchemaToSQL, compile_create_table, compile_statements
# DEPENDENCIES: dbx.sql, dbx.dialects, dbx.models
# ============================================================================
"""
Schema to SQL Compiler.

Turns a Schema (or its JSON mapping) into dialect-specific DDL:

    CREATE TABLE IF NOT EXISTS <table> (
        <columns>,
        <foreign keys>,
        <check constraints, sorted>
    );
    <CREATE INDEX statements, sorted>
    <full-text index>

Everything is validated before rendering starts, so a bad schema never
yields partial SQL. The output is a pure function of the input: compiling
the same schema twice gives byte-identical text.

Column ``constraint`` and ``as`` expressions and table ``constraints`` are
copied into the DDL verbatim. They are trusted input, exactly like
string-concatenated SQL.

Usage:
    from dbx.schema import compile_create_table

    ddl = compile_create_table(schema, "postgres")
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from dbx.config import CompilerDefaults, get_defaults
from dbx.contracts import ColumnType, DateOn, Dialect
from dbx.dialects import DialectProfile, get_profile
from dbx.errors import SchemaError
from dbx.logging import ComponentType, get_logger, log_context
from dbx.models.schema import CheckConstraint, Column, Index, Schema
from dbx.query.binder import strip_null_ordering
from dbx.schema.ddl_utils import CommentBuilder, ConstraintBuilder, IndexBuilder
from dbx.sql import SQL, Composable, Identifier, quote_literal

logger = get_logger(__name__, ComponentType.DDL)

SchemaLike = Union[Schema, Mapping[str, Any]]


class SchemaToSQL:
    """
    Convert Schema values to DDL statements for one dialect.

    The instance only holds the resolved profile and defaults, so it can be
    shared between threads.
    """

    def __init__(
        self,
        dialect: Union[str, Dialect, DialectProfile],
        defaults: Optional[CompilerDefaults] = None,
    ):
        """
        Initialize the compiler.

        Args:
            dialect: Target dialect (name, enum or profile)
            defaults: Compiler defaults (process defaults when omitted)

        Raises:
            DialectError: If the dialect is unknown
        """
        self.profile = get_profile(dialect)
        self.defaults = defaults or get_defaults().compiler

    @property
    def dialect(self) -> Dialect:
        return self.profile.dialect

    def _render(self, composable: Composable) -> str:
        return self.profile.rewrite_keywords(composable.render(self.profile))

    # =========================================================================
    # COLUMNS
    # =========================================================================

    def column_type(self, column: Column) -> str:
        """
        Physical type with its length clause.

        Auto-increment keys use the dialect's serial type when it has one,
        long strings become the dialect's text type.
        """
        profile = self.profile
        if column.auto_increment and profile.serial_type:
            return profile.serial_type
        if column.type == ColumnType.STRING and profile.promotes_to_text(column.max_length):
            return profile.text_type

        type_name = profile.type_name(column.type)
        if column.type == ColumnType.STRING:
            return f"{type_name}({column.max_length or self.defaults.default_string_length})"
        if column.max_length is not None:
            return f"{type_name}({column.max_length})"
        return type_name

    def default_value(self, column: Column) -> Optional[str]:
        """
        DEFAULT clause value, or None.

        Automatic timestamps win over literal defaults; generated and
        auto-increment columns never get one.
        """
        if column.as_ is not None or column.auto_increment:
            return None

        if column.date_on == DateOn.INSERT:
            return "CURRENT_TIMESTAMP"
        if column.date_on == DateOn.UPDATE:
            if self.profile.supports_on_update_timestamp:
                return "CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"
            return "CURRENT_TIMESTAMP"

        value = column.default
        if value is None:
            return None
        if isinstance(value, str):
            # Pre-quoted literals and parenthesized expressions pass through
            if value.startswith("(") and value.endswith(")"):
                return value
            if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
                return value
            return quote_literal(value)
        if isinstance(value, (dict, list, tuple)):
            return f"({quote_literal(value)})"
        return quote_literal(value)

    def create_column(self, name: str, column: Column, required: bool, name_pad: int) -> str:
        """
        Render one column line (without trailing comma).

        Args:
            name: Column name
            column: Column definition
            required: Whether the column is listed in ``required``
            name_pad: Width the rendered name is padded to
        """
        parts = [
            " " * self.defaults.pad_width,
            Identifier(name).render(self.profile).ljust(name_pad),
            self.column_type(column),
        ]

        if column.primary_key or required:
            parts.append(" NOT NULL")

        expression = column.generated_expression(self.dialect)
        if expression:
            parts.append(f" GENERATED ALWAYS AS ({strip_null_ordering(expression)}) STORED")

        default = self.default_value(column)
        if default is not None:
            parts.append(f" DEFAULT {default}")

        if column.primary_key:
            parts.append(" PRIMARY KEY")
        elif column.unique:
            parts.append(" UNIQUE")

        if column.auto_increment and not self.profile.serial_type:
            parts.append(self.profile.auto_increment)

        parts.append(CommentBuilder.column(column.description, self.profile).render(self.profile))
        return "".join(parts)

    # =========================================================================
    # TABLE BODY CONSTRAINTS
    # =========================================================================

    def generate_relations(self, prefix: str, schema: Schema) -> List[str]:
        """Foreign key clauses, in declaration order."""
        if not self.profile.supports_foreign_keys or not schema.relations:
            return []
        return [
            self._render(ConstraintBuilder.foreign_key(prefix, name, relation))
            for name, relation in schema.relations.items()
        ]

    def generate_constraints(self, prefix: str, schema: Schema) -> List[str]:
        """Column and table CHECK clauses, sorted."""
        clauses: List[str] = []
        for name, column in schema.properties.items():
            expression = ConstraintBuilder.column_expression(name, column)
            if expression is None:
                continue
            clauses.append(self._render(
                ConstraintBuilder.check(f"{prefix}_{name}", expression, self.profile)
            ))

        for constraint in schema.constraints:
            if isinstance(constraint, CheckConstraint) and not constraint.applies_to(self.dialect):
                continue
            clauses.append(self._render(ConstraintBuilder.independent(prefix, constraint, self.profile)))

        return sorted(clauses)

    # =========================================================================
    # INDICES
    # =========================================================================

    @staticmethod
    def collect_indices(schema: Schema) -> List[Index]:
        """
        Declared indices plus one per column carrying an ``index`` attribute.

        A synthesized index marks its first JSON-array member as the array
        position.
        """
        indices = list(schema.indices)
        for column in schema.properties.values():
            if not column.index:
                continue
            types = [schema.properties[n].type for n in column.index]
            array = types.index(ColumnType.ARRAY) if ColumnType.ARRAY in types else None
            indices.append(Index(properties=column.index, array=array))
        return indices

    def generate_indexes(self, prefix: str, table: str, schema: Schema) -> List[str]:
        """Standalone index statements, deduplicated and sorted."""
        statements = {
            self._render(IndexBuilder.standard(prefix, table, index, self.profile, self.defaults))
            for index in self.collect_indices(schema)
        }
        return sorted(statements)

    def generate_fulltext(self, prefix: str, table: str, schema: Schema) -> List[str]:
        stmt = IndexBuilder.fulltext(prefix, table, schema.full_text, self.profile, self.defaults)
        return [self._render(stmt)] if stmt is not None else []

    # =========================================================================
    # TABLE
    # =========================================================================

    def generate_table(self, schema: Schema, table: str) -> str:
        """CREATE TABLE statement for the schema."""
        prefix = table.lower()
        names = [Identifier(n).render(self.profile) for n in schema.properties]
        name_pad = max(len(n) for n in names) + 1

        lines = [
            self.profile.rewrite_keywords(
                self.create_column(name, column, schema.is_required(name), name_pad)
            )
            for name, column in schema.properties.items()
        ]
        pad = " " * self.defaults.pad_width
        lines.extend(pad + line for line in self.generate_relations(prefix, schema))
        lines.extend(pad + line for line in self.generate_constraints(prefix, schema))

        head = SQL("CREATE TABLE IF NOT EXISTS {} (").format(Identifier(table)).render(self.profile)
        return head + "\n" + ",\n".join(lines) + "\n);"

    def generate_statements(self, schema: SchemaLike, table_name: Optional[str] = None) -> List[str]:
        """
        Generate every DDL statement for one schema.

        Args:
            schema: Schema or its JSON mapping
            table_name: Override of the schema's table name

        Returns:
            CREATE TABLE followed by index statements

        Raises:
            SchemaError: If the schema is invalid or has no table name or columns
        """
        schema = Schema.parse(schema)
        table = table_name or schema.table_name
        if not table:
            raise SchemaError("Schema has neither a table nor a type name")
        if not schema.properties:
            raise SchemaError(f"Schema for table '{table}' has no columns", table=table)

        with log_context(table=table, dialect=self.profile.name, operation="create_table"):
            prefix = table.lower()
            statements = [self.generate_table(schema, table)]
            statements.extend(self.generate_indexes(prefix, table, schema))
            statements.extend(self.generate_fulltext(prefix, table, schema))

            logger.debug(
                f"Generated {len(statements)} DDL statements for {table} "
                f"({len(schema.properties)} columns)"
            )
        return statements

    def generate_all(self, schemas: Iterable[SchemaLike]) -> List[str]:
        """
        Generate DDL for several schemas, in order.

        Args:
            schemas: Schemas or JSON mappings

        Returns:
            Flat list of statements
        """
        statements: List[str] = []
        for schema in schemas:
            statements.extend(self.generate_statements(schema))
        logger.info(f"Generated {len(statements)} DDL statements for {self.profile.name}")
        return statements


# ============================================================================
# FUNCTIONAL API
# ============================================================================

def compile_statements(
    schema: SchemaLike,
    dialect: Union[str, Dialect, DialectProfile],
    table_name: Optional[str] = None,
) -> List[str]:
    """
    Compile a schema to a list of DDL statements.

    Raises:
        DialectError: If the dialect is unknown
        SchemaError: If the schema is invalid
    """
    return SchemaToSQL(dialect).generate_statements(schema, table_name)


def compile_create_table(
    schema: SchemaLike,
    dialect: Union[str, Dialect, DialectProfile],
    table_name: Optional[str] = None,
) -> str:
    """
    Compile a schema to DDL text, one statement per line group.

    Args:
        schema: Schema or its JSON mapping
        dialect: Target dialect
        table_name: Override of the schema's table name

    Returns:
        DDL text ending with ``;``
    """
    return "\n".join(compile_statements(schema, dialect, table_name))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaToSQL",
    "compile_create_table",
    "compile_statements",
]
