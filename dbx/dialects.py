# ============================================================================
# DIALECT PROFILES
# ============================================================================
# STATUS: Core - Per-dialect lookup table
# PURPOSE: Type names, feature flags and operator spellings per backend
# CREATED: 17 OCT 2026
# EXPORTS: DialectProfile, PROFILES, get_profile
# DEPENDENCIES: none
# ============================================================================
"""
Dialect Profiles.

One frozen row per supported backend. The DDL and condition compilers only
consult these rows; supporting a new backend means adding a row here.

Structural differences that are not a simple spelling are still expressed as
flags (``supports_named_checks``, ``supports_foreign_keys``, a ``None``
full-text template) so the compilers stay free of dialect names.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

from dbx.contracts import ColumnType, Dialect
from dbx.errors import DialectError


@dataclass(frozen=True)
class DialectProfile:
    """
    Feature table for one SQL backend.

    Template attributes are ``dbx.sql.SQL`` format strings; their slots are
    filled with composables by the compilers.
    """
    dialect: Dialect

    # Types
    type_names: Mapping[ColumnType, str]
    serial_type: Optional[str] = None          # replaces the type of an auto-increment PK
    auto_increment: str = ""                   # suffix of an auto-increment PK
    text_type: str = "TEXT"
    text_threshold: Optional[int] = None       # maxLength above which strings become text_type

    # Column features
    supports_column_comments: bool = False
    supports_on_update_timestamp: bool = False

    # Table features
    supports_named_checks: bool = True
    supports_foreign_keys: bool = True
    supports_not_enforced: bool = False

    # Indices
    array_cast_suffix: str = ""                # " ARRAY" for multi-valued indices
    fulltext_index: Optional[str] = None       # {name} {table} {columns} {language}
    fulltext_coalesce: bool = False            # COALESCE(col,'') concatenation instead of a list

    # Conditions
    fulltext_match: Optional[str] = None       # {columns} {term} {language}
    fulltext_term_suffix: str = ""
    contains_template: str = "{column} LIKE {value}"
    contains_wraps_like: bool = False          # value wrapped in %...%
    regex_operator: str = "REGEXP"

    # Post-processing of the rendered DDL, word by word
    keyword_rewrites: Mapping[str, str] = field(default_factory=dict)

    # Parameters and quoting
    identifier_quote: str = '"'
    placeholder_style: str = "qmark"           # "qmark" (?) or "numeric" ($1)
    strips_null_ordering: bool = True          # ORDER BY NULL is MySQL-only

    @property
    def name(self) -> str:
        return self.dialect.value

    def type_name(self, column_type: ColumnType) -> str:
        """Physical type for an abstract column type."""
        return self.type_names[column_type]

    def promotes_to_text(self, max_length: Optional[int]) -> bool:
        """Check if a string of this length must be stored as the long-text type."""
        return (
            self.text_threshold is not None
            and max_length is not None
            and max_length > self.text_threshold
        )

    def rewrite_keywords(self, text: str) -> str:
        """Apply the dialect's keyword rewrites to rendered SQL."""
        if not self.keyword_rewrites:
            return text
        rewrites = self.keyword_rewrites
        return re.sub(r"\w+", lambda m: rewrites.get(m.group(0), m.group(0)), text)


# ============================================================================
# PROFILE TABLE
# ============================================================================

_MYSQL = DialectProfile(
    dialect=Dialect.MYSQL,
    type_names=MappingProxyType({
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.NUMBER: "DOUBLE",
        ColumnType.STRING: "VARCHAR",
        ColumnType.DATE: "DATETIME",
        ColumnType.OBJECT: "JSON",
        ColumnType.ARRAY: "JSON",
    }),
    auto_increment=" AUTO_INCREMENT",
    text_threshold=16383,  # utf8mb4 VARCHAR limit
    supports_column_comments=True,
    supports_on_update_timestamp=True,
    supports_not_enforced=True,
    array_cast_suffix=" ARRAY",
    fulltext_index="CREATE FULLTEXT INDEX {name} ON {table} ({columns})",
    fulltext_match="MATCH({columns}) AGAINST ({term} IN BOOLEAN MODE)",
    fulltext_term_suffix="*",
    contains_template="{value} MEMBER OF ({column})",
    regex_operator="RLIKE",
    identifier_quote="`",
    strips_null_ordering=False,
)

_POSTGRES = DialectProfile(
    dialect=Dialect.POSTGRES,
    type_names=MappingProxyType({
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.NUMBER: "DOUBLE PRECISION",
        ColumnType.STRING: "VARCHAR",
        ColumnType.DATE: "TIMESTAMP",
        ColumnType.OBJECT: "JSONB",
        ColumnType.ARRAY: "JSONB",
    }),
    serial_type="SERIAL",
    fulltext_index="CREATE INDEX {name} ON {table} USING GIN (TO_TSVECTOR({language}, {columns}))",
    fulltext_coalesce=True,
    fulltext_match="TO_TSVECTOR({language}, {columns}) @@ TO_TSQUERY({term})",
    contains_template="JSONB_EXISTS(CAST({column} AS JSONB), {value})",
    regex_operator="~*",
    keyword_rewrites=MappingProxyType({
        "DATETIME": "TIMESTAMP",
        "JSON_EXTRACT": "JSONB_EXTRACT_PATH",
        "RLIKE": "~*",
        "REGEXP": "~*",
    }),
    placeholder_style="numeric",
)

_SQLITE = DialectProfile(
    dialect=Dialect.SQLITE,
    type_names=MappingProxyType({
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.NUMBER: "DOUBLE",
        ColumnType.STRING: "VARCHAR",
        ColumnType.DATE: "DATETIME",
        ColumnType.OBJECT: "JSON",
        ColumnType.ARRAY: "JSON",
    }),
    auto_increment=" AUTOINCREMENT",
    supports_named_checks=False,
    supports_foreign_keys=False,
    contains_template="{column} LIKE {value}",
    contains_wraps_like=True,
    regex_operator="REGEXP",
)

PROFILES: Mapping[Dialect, DialectProfile] = MappingProxyType({
    Dialect.MYSQL: _MYSQL,
    Dialect.POSTGRES: _POSTGRES,
    Dialect.SQLITE: _SQLITE,
})


def get_profile(dialect: Union[str, Dialect, DialectProfile]) -> DialectProfile:
    """
    Look up the profile of a dialect.

    Args:
        dialect: Dialect enum, its name, or an already resolved profile

    Returns:
        DialectProfile row

    Raises:
        DialectError: If the name is not a supported dialect
    """
    if isinstance(dialect, DialectProfile):
        return dialect
    resolved = Dialect.parse(dialect)
    if resolved is None:
        raise DialectError(dialect)
    return PROFILES[resolved]


__all__ = [
    "DialectProfile",
    "PROFILES",
    "get_profile",
]
