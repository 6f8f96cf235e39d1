# ============================================================================
# DDL COMPILER TESTS
# ============================================================================
# STATUS: Tests - CREATE TABLE / INDEX generation per dialect
# PURPOSE: Golden DDL, determinism, structural dialect differences
# CREATED: 17 OCT 2026
# ============================================================================
"""
DDL Compiler Tests

Covers:
1. Golden DDL for the account schema on MySQL, PostgreSQL and SQLite
2. Column clauses (types, lengths, defaults, generated columns, comments)
3. Foreign keys and check constraints (named, unnamed, provider filtered)
4. Index synthesis (per-column index, array members, full text)
5. Fail-fast validation
6. SQLite DDL executed against a real database

Run with:
    pytest tests/test_ddl_compiler.py -v
"""

import sqlite3

import pytest

from dbx.config import CompilerDefaults
from dbx.errors import DialectError, SchemaError
from dbx.models import Column
from dbx.schema import SchemaToSQL, compile_create_table, compile_statements


MYSQL = """
CREATE TABLE IF NOT EXISTS Account (
    id          INTEGER NOT NULL PRIMARY KEY AUTO_INCREMENT COMMENT 'Unique identifier, auto-generated. It''s the primary key.',
    inserted    DATETIME DEFAULT CURRENT_TIMESTAMP COMMENT 'Timestamp when current record is inserted',
    updated     DATETIME DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP COMMENT 'Timestamp when current record is updated',
    etag        VARCHAR(1024) COMMENT 'Possible ETag',
    comments    VARCHAR(8192) COMMENT 'General comments',
    country     VARCHAR(16) NOT NULL DEFAULT 'US' COMMENT 'Country code',
    email       VARCHAR(128) UNIQUE COMMENT 'Main email',
    established DATETIME(6) COMMENT 'Established on',
    enabled     BOOLEAN NOT NULL DEFAULT true COMMENT 'Whether it is enabled',
    externalId  VARCHAR(512) UNIQUE COMMENT 'External ID',
    phone       VARCHAR(128) COMMENT 'Phone number',
    name        VARCHAR(256) NOT NULL UNIQUE COMMENT 'Descriptive name',
    preferences JSON NOT NULL DEFAULT ('{"wrap":true,"minAge":18}') COMMENT 'General options',
    valueList   JSON GENERATED ALWAYS AS (JSON_EXTRACT(preferences, '$.*')) STORED,
    CONSTRAINT account_email CHECK (email IS NULL OR email REGEXP '^[^@]+@[^@]+[.][^@]{2,}$'),
    CONSTRAINT account_established CHECK (established >= '2020-01-01'),
    CONSTRAINT account_phone CHECK (phone IS NULL OR phone REGEXP '^[0-9]{8,16}$')
);
CREATE INDEX account_id_valueList_enabled ON Account (id,(CAST(valueList AS CHAR(32) ARRAY)),enabled);
CREATE INDEX account_inserted ON Account (inserted);
CREATE INDEX account_updated ON Account (updated);
CREATE FULLTEXT INDEX account_fulltext ON Account (comments,country,phone,name);
""".strip()

POSTGRES = """
CREATE TABLE IF NOT EXISTS Account (
    id          SERIAL NOT NULL PRIMARY KEY,
    inserted    TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    etag        VARCHAR(1024),
    comments    VARCHAR(8192),
    country     VARCHAR(16) NOT NULL DEFAULT 'US',
    email       VARCHAR(128) UNIQUE,
    established TIMESTAMP(6),
    enabled     BOOLEAN NOT NULL DEFAULT true,
    externalId  VARCHAR(512) UNIQUE,
    phone       VARCHAR(128),
    name        VARCHAR(256) NOT NULL UNIQUE,
    preferences JSONB NOT NULL DEFAULT ('{"wrap":true,"minAge":18}'),
    valueList   JSONB GENERATED ALWAYS AS (JSONB_EXTRACT_PATH(preferences, '$.*')) STORED,
    CONSTRAINT account_email CHECK (email IS NULL OR email ~* '^[^@]+@[^@]+[.][^@]{2,}$'),
    CONSTRAINT account_established CHECK (established >= '2020-01-01'),
    CONSTRAINT account_phone CHECK (phone IS NULL OR phone ~* '^[0-9]{8,16}$')
);
CREATE INDEX account_id_valueList_enabled ON Account (id,(CAST(valueList AS CHAR(32))),enabled);
CREATE INDEX account_inserted ON Account (inserted);
CREATE INDEX account_updated ON Account (updated);
CREATE INDEX account_fulltext ON Account USING GIN (TO_TSVECTOR('english', COALESCE(comments,'')||' '||COALESCE(country,'')||' '||COALESCE(phone,'')||' '||COALESCE(name,'')));
""".strip()

SQLITE = """
CREATE TABLE IF NOT EXISTS Account (
    id          INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    inserted    DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated     DATETIME DEFAULT CURRENT_TIMESTAMP,
    etag        VARCHAR(1024),
    comments    VARCHAR(8192),
    country     VARCHAR(16) NOT NULL DEFAULT 'US',
    email       VARCHAR(128) UNIQUE,
    established DATETIME(6),
    enabled     BOOLEAN NOT NULL DEFAULT true,
    externalId  VARCHAR(512) UNIQUE,
    phone       VARCHAR(128),
    name        VARCHAR(256) NOT NULL UNIQUE,
    preferences JSON NOT NULL DEFAULT ('{"wrap":true,"minAge":18}'),
    valueList   JSON GENERATED ALWAYS AS (JSON_EXTRACT(preferences, '$.*')) STORED,
    CHECK (email IS NULL OR email REGEXP '^[^@]+@[^@]+[.][^@]{2,}$'),
    CHECK (established >= '2020-01-01'),
    CHECK (phone IS NULL OR phone REGEXP '^[0-9]{8,16}$')
);
CREATE INDEX account_id_valueList_enabled ON Account (id,(CAST(valueList AS CHAR(32))),enabled);
CREATE INDEX account_inserted ON Account (inserted);
CREATE INDEX account_updated ON Account (updated);
""".strip()


def _column_line(ddl: str, name: str) -> str:
    for line in ddl.splitlines():
        if line.strip().startswith(name + " "):
            return line.strip()
    raise AssertionError(f"No column line for {name}")


# ============================================================================
# GOLDEN DDL
# ============================================================================

class TestGoldenDDL:
    """Full account schema per dialect."""

    def test_mysql(self, account_schema):
        assert compile_create_table(account_schema, "mysql") == MYSQL

    def test_postgres(self, account_schema):
        assert compile_create_table(account_schema, "postgres") == POSTGRES

    def test_sqlite(self, account_schema):
        assert compile_create_table(account_schema, "sqlite") == SQLITE

    @pytest.mark.parametrize("dialect", ["mysql", "postgres", "sqlite"])
    def test_deterministic(self, account_schema, dialect):
        first = compile_create_table(account_schema, dialect)
        second = compile_create_table(account_schema, dialect)
        assert first == second

    @pytest.mark.parametrize("dialect", ["mysql", "postgres", "sqlite"])
    def test_one_clause_per_column_in_order(self, account_schema, dialect):
        ddl = compile_statements(account_schema, dialect)[0]
        body = ddl.splitlines()[1:-1]
        names = [line.split()[0] for line in body if not line.strip().startswith(("CONSTRAINT", "CHECK"))]
        assert names == list(account_schema["properties"])
        assert ddl.endswith("\n);")
        assert ",\n)" not in ddl

    def test_statements_match_text(self, account_schema):
        statements = compile_statements(account_schema, "postgres")
        assert "\n".join(statements) == POSTGRES
        assert len(statements) == 5

    def test_table_name_override(self, account_schema):
        ddl = compile_create_table(account_schema, "sqlite", table_name="Client")
        assert ddl.startswith("CREATE TABLE IF NOT EXISTS Client (")
        assert "CREATE INDEX client_inserted ON Client (inserted);" in ddl

    def test_table_defaults_to_type(self, account_schema):
        del account_schema["table"]
        ddl = compile_create_table(account_schema, "sqlite")
        assert ddl.startswith("CREATE TABLE IF NOT EXISTS account (")


# ============================================================================
# COLUMNS
# ============================================================================

class TestColumns:
    """Column clause rendering."""

    @pytest.mark.parametrize("dialect", ["mysql", "postgres", "sqlite"])
    def test_integer_primary_key_has_no_default(self, dialect):
        schema = {"table": "t", "properties": {"id": {"type": "integer", "primaryKey": True, "default": 5}}}
        line = _column_line(compile_create_table(schema, dialect), "id")
        assert "DEFAULT" not in line
        assert "PRIMARY KEY" in line

    def test_long_string_becomes_text_on_mysql(self):
        schema = {"table": "t", "properties": {"body": {"type": "string", "maxLength": 65535}}}
        assert _column_line(compile_create_table(schema, "mysql"), "body") == "body TEXT"
        assert _column_line(compile_create_table(schema, "postgres"), "body") == "body VARCHAR(65535)"

    def test_default_string_length(self):
        compiler = SchemaToSQL("mysql", CompilerDefaults(default_string_length=64))
        assert compiler.column_type(Column(type="string")) == "VARCHAR(64)"

    def test_number_types(self):
        assert SchemaToSQL("mysql").column_type(Column(type="number")) == "DOUBLE"
        assert SchemaToSQL("postgres").column_type(Column(type="number")) == "DOUBLE PRECISION"

    def test_string_default_is_quoted(self):
        compiler = SchemaToSQL("mysql")
        assert compiler.default_value(Column(default="O'Brien")) == "'O''Brien'"

    def test_prequoted_and_expression_defaults_pass_through(self):
        compiler = SchemaToSQL("mysql")
        assert compiler.default_value(Column(default="'x'")) == "'x'"
        assert compiler.default_value(Column(default="(UUID())")) == "(UUID())"

    def test_object_default_is_parenthesized_json(self):
        compiler = SchemaToSQL("postgres")
        column = Column(type="array", default=["a", "b"])
        assert compiler.default_value(column) == """('["a","b"]')"""

    def test_numeric_and_boolean_defaults(self):
        compiler = SchemaToSQL("sqlite")
        assert compiler.default_value(Column(type="number", default=1.5)) == "1.5"
        assert compiler.default_value(Column(type="boolean", default=False)) == "false"

    def test_date_on_wins_over_default(self):
        compiler = SchemaToSQL("mysql")
        column = Column(type="date", dateOn="insert", default="2020-01-01")
        assert compiler.default_value(column) == "CURRENT_TIMESTAMP"

    def test_generated_column_never_has_default(self):
        schema = {"table": "t", "properties": {"total": {"type": "number", "as": "a + b", "default": 0}}}
        line = _column_line(compile_create_table(schema, "sqlite"), "total")
        assert line == "total DOUBLE GENERATED ALWAYS AS (a + b) STORED"

    @pytest.mark.parametrize("date_on", ["insert", "update"])
    def test_generated_date_column_has_no_default(self, date_on):
        schema = {"table": "t", "properties": {"d": {"type": "date", "as": "CURRENT_DATE", "dateOn": date_on}}}
        line = _column_line(compile_create_table(schema, "mysql"), "d")
        assert line == "d DATETIME GENERATED ALWAYS AS (CURRENT_DATE) STORED"
        assert SchemaToSQL("mysql").default_value(Column(type="date", as_="CURRENT_DATE", date_on=date_on)) is None

    def test_generated_expression_per_dialect(self):
        schema = {
            "table": "t",
            "properties": {
                "a": {"type": "integer"},
                "b": {"type": "integer", "as": {"mysql": "a * 2", "postgres": "a * 3"}},
            },
        }
        assert "AS (a * 2)" in compile_create_table(schema, "mysql")
        assert "AS (a * 3)" in compile_create_table(schema, "postgres")
        assert "GENERATED" not in compile_create_table(schema, "sqlite")

    def test_generated_expression_drops_null_ordering(self):
        schema = {
            "table": "t",
            "properties": {
                "tags": {"type": "array"},
                "tagList": {"type": "string", "as": "(SELECT GROUP_CONCAT(value) FROM json_each(tags) ORDER BY NULL)"},
            },
        }
        line = _column_line(compile_create_table(schema, "sqlite"), "tagList")
        assert "ORDER BY NULL" not in line
        assert "json_each(tags))" in line

    def test_comments_only_where_supported(self):
        schema = {"table": "t", "properties": {"a": {"description": "Line one\nLine two"}}}
        assert _column_line(compile_create_table(schema, "mysql"), "a") == "a VARCHAR(128) COMMENT 'Line one'"
        assert "COMMENT" not in compile_create_table(schema, "postgres")

    def test_quoted_identifiers(self):
        schema = {"table": "order items", "properties": {"unit price": {"type": "number"}}}
        ddl = compile_create_table(schema, "mysql")
        assert ddl.startswith("CREATE TABLE IF NOT EXISTS `order items` (")
        assert "`unit price` DOUBLE" in ddl


# ============================================================================
# RELATIONS AND CONSTRAINTS
# ============================================================================

class TestConstraints:
    """Foreign keys and CHECK clauses."""

    @pytest.fixture
    def order_schema(self):
        return {
            "table": "orders",
            "properties": {
                "id": {"type": "integer", "primaryKey": True},
                "accountId": {"type": "integer"},
                "quantity": {"type": "integer", "minimum": 1, "maximum": 100},
            },
            "relations": {
                "account": {"join": "accountId", "target": "account", "delete": "cascade", "update": "set-null"},
            },
            "constraints": [
                "quantity < 1000",
                {"name": "Positive", "check": "id > 0"},
                {"name": "pg_only", "check": "quantity IS NOT NULL", "provider": "postgres"},
                {"name": "lax", "check": "id < 1000000", "enforced": False},
            ],
        }

    def test_foreign_key(self, order_schema):
        ddl = compile_create_table(order_schema, "mysql")
        assert (
            "    CONSTRAINT orders_account FOREIGN KEY (accountId) REFERENCES account (id)"
            " ON DELETE CASCADE ON UPDATE SET NULL,\n"
        ) in ddl

    def test_sqlite_has_no_foreign_keys(self, order_schema):
        assert "FOREIGN KEY" not in compile_create_table(order_schema, "sqlite")

    def test_bounds_become_one_check(self, order_schema):
        ddl = compile_create_table(order_schema, "postgres")
        assert "CONSTRAINT orders_quantity CHECK (quantity >= 1 AND quantity <= 100)" in ddl

    def test_exclusive_bounds(self):
        schema = {
            "table": "prices",
            "properties": {"amount": {"type": "number", "exclusiveMinimum": 0, "exclusiveMaximum": 10, "minimum": 1}},
        }
        ddl = compile_create_table(schema, "postgres")
        assert "CONSTRAINT prices_amount CHECK (amount >= 1 AND amount > 0 AND amount < 10)" in ddl

    def test_exclusive_bound_rejects_edge_value(self):
        schema = {"table": "prices", "properties": {"amount": {"type": "integer", "exclusiveMinimum": 0}}}
        conn = sqlite3.connect(":memory:")
        try:
            for statement in compile_statements(schema, "sqlite"):
                conn.execute(statement)
            conn.execute("INSERT INTO prices (amount) VALUES (1)")
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("INSERT INTO prices (amount) VALUES (0)")
        finally:
            conn.close()

    def test_named_table_constraint_is_lowercased(self, order_schema):
        assert "CONSTRAINT orders_positive CHECK (id > 0)" in compile_create_table(order_schema, "mysql")

    def test_unnamed_table_constraint(self, order_schema):
        assert "    CHECK (quantity < 1000)" in compile_create_table(order_schema, "mysql")

    def test_provider_filter(self, order_schema):
        assert "quantity IS NOT NULL" in compile_create_table(order_schema, "postgres")
        assert "quantity IS NOT NULL" not in compile_create_table(order_schema, "mysql")

    def test_not_enforced_only_on_mysql(self, order_schema):
        assert "CONSTRAINT orders_lax CHECK (id < 1000000) NOT ENFORCED" in compile_create_table(order_schema, "mysql")
        assert "NOT ENFORCED" not in compile_create_table(order_schema, "postgres")

    def test_constraints_sorted(self, order_schema):
        body = compile_statements(order_schema, "mysql")[0].splitlines()
        checks = [line.strip().rstrip(",") for line in body if "CHECK" in line]
        assert checks == sorted(checks)

    def test_sqlite_checks_are_unnamed(self, order_schema):
        ddl = compile_create_table(order_schema, "sqlite")
        assert "CONSTRAINT" not in ddl
        assert "CHECK (id > 0)" in ddl


# ============================================================================
# INDICES
# ============================================================================

class TestIndices:
    """Standalone index statements."""

    def test_declared_unique_index(self):
        schema = {
            "table": "Member",
            "properties": {"org": {}, "email": {}},
            "indices": [{"properties": ["org", "email"], "unique": True}],
        }
        statements = compile_statements(schema, "sqlite")
        assert statements[1] == "CREATE UNIQUE INDEX member_org_email ON Member (org,email);"

    def test_explicit_index_name(self):
        schema = {
            "table": "t",
            "properties": {"a": {}},
            "indices": [{"properties": ["a"], "name": "by_a"}],
        }
        assert compile_statements(schema, "postgres")[1] == "CREATE INDEX by_a ON t (a);"

    def test_empty_index_tag_indexes_column(self):
        schema = {"table": "t", "properties": {"slug": {"index": ""}}}
        assert compile_statements(schema, "mysql")[1] == "CREATE INDEX t_slug ON t (slug);"

    def test_comma_index_tag(self):
        schema = {"table": "t", "properties": {"a": {"index": "a, b"}, "b": {}}}
        assert compile_statements(schema, "mysql")[1] == "CREATE INDEX t_a_b ON t (a,b);"

    def test_array_subtype(self):
        schema = {
            "table": "t",
            "properties": {"tags": {"type": "array"}},
            "indices": [{"properties": ["tags"], "array": 0, "subType": "UNSIGNED"}],
        }
        assert compile_statements(schema, "mysql")[1] == "CREATE INDEX t_tags ON t ((CAST(tags AS UNSIGNED ARRAY)));"

    def test_duplicate_indices_emitted_once(self):
        schema = {
            "table": "t",
            "properties": {"a": {"index": ["a"]}},
            "indices": [{"properties": ["a"]}],
        }
        assert len(compile_statements(schema, "sqlite")) == 2

    def test_no_fulltext_on_sqlite(self, account_schema):
        assert "fulltext" not in compile_create_table(account_schema, "sqlite")

    def test_fulltext_language_from_defaults(self, account_schema):
        compiler = SchemaToSQL("postgres", CompilerDefaults(fulltext_language="simple"))
        assert "TO_TSVECTOR('simple'," in compiler.generate_statements(account_schema)[-1]


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidation:
    """Fail fast, before any output."""

    def test_unknown_dialect(self, account_schema):
        with pytest.raises(DialectError, match="oracle"):
            compile_create_table(account_schema, "oracle")

    def test_unknown_column_type(self):
        with pytest.raises(SchemaError):
            compile_create_table({"table": "t", "properties": {"a": {"type": "money"}}}, "mysql")

    def test_dangling_required(self):
        with pytest.raises(SchemaError, match="missing"):
            compile_create_table({"table": "t", "properties": {"a": {}}, "required": ["missing"]}, "mysql")

    def test_dangling_relation(self):
        schema = {"table": "t", "properties": {"a": {}}, "relations": {"r": {"join": "b", "target": "x"}}}
        with pytest.raises(SchemaError):
            compile_create_table(schema, "postgres")

    def test_no_columns(self):
        with pytest.raises(SchemaError, match="no columns"):
            compile_create_table({"table": "t"}, "sqlite")

    def test_no_table_name(self):
        with pytest.raises(SchemaError):
            compile_create_table({"properties": {"a": {}}}, "sqlite")


# ============================================================================
# EXECUTION
# ============================================================================

class TestSQLiteExecution:
    """Compiled DDL is accepted by SQLite."""

    def test_schema_executes(self):
        schema = {
            "table": "Item",
            "properties": {
                "id": {"type": "integer", "primaryKey": True},
                "inserted": {"type": "date", "dateOn": "insert", "index": ""},
                "name": {"type": "string", "maxLength": 64, "unique": True},
                "price": {"type": "number", "minimum": 0},
                "tags": {"type": "array", "default": []},
                "tagCount": {"type": "integer", "as": "JSON_ARRAY_LENGTH(tags)"},
            },
            "required": ["name"],
            "indices": [{"properties": ["name", "price"]}],
        }
        conn = sqlite3.connect(":memory:")
        try:
            for statement in compile_statements(schema, "sqlite"):
                conn.execute(statement)
            conn.execute("INSERT INTO Item (name, price, tags) VALUES (?, ?, ?)", ("pen", 1.5, '["a","b"]'))
            row = conn.execute("SELECT id, tagCount, inserted FROM Item").fetchone()
            assert row[0] == 1
            assert row[1] == 2
            assert row[2] is not None
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("INSERT INTO Item (name, price) VALUES (?, ?)", ("ink", -1))
        finally:
            conn.close()
