# ============================================================================
# SCHEMA MODEL
# ============================================================================
# STATUS: Core model - Table description consumed by the DDL compiler
# PURPOSE: Immutable columns, indices, relations, constraints and table schema
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: Column, Index, Relation, CheckConstraint, Constraint, Schema
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Model

A Schema describes one table. It is usually produced by a schema generator
from a class definition and stored as JSON, so every field accepts the
camelCase JSON key (``maxLength``, ``primaryKey``, ``fullText``, ``$id``)
as well as the Python name.

Loose generator output is normalised on the way in:
- a column without ``type`` is a string, ``format: date-time`` makes it a date
- ``json`` is accepted as an alias of ``object``
- flag tags given as strings (``primaryKey: ""``) become ``True``
- comma separated ``index`` / ``fullText`` strings become lists
- multi-line descriptions keep their first line

Every column referenced by ``required``, ``fullText``, an index or a
relation must exist in ``properties``.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from dbx.contracts import ColumnType, DateOn, Dialect, RelationType
from dbx.errors import SchemaError


def _split_names(value: str) -> List[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


# ============================================================================
# COLUMN
# ============================================================================

class Column(BaseModel):
    """
    One column of a table.

    ``as_`` holds the generated-column expression, either dialect-neutral SQL
    or a map of dialect name to SQL. ``constraint`` is a raw boolean SQL
    expression enforced as a CHECK; both are trusted and not sanitised.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    type: ColumnType = Field(default=ColumnType.STRING)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    minimum: Optional[Union[int, float, str]] = None
    maximum: Optional[Union[int, float, str]] = None
    exclusive_minimum: Optional[Union[int, float, str]] = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: Optional[Union[int, float, str]] = Field(default=None, alias="exclusiveMaximum")
    primary_key: bool = Field(default=False, alias="primaryKey")
    unique: bool = False
    default: Any = None
    date_on: Optional[DateOn] = Field(default=None, alias="dateOn")
    as_: Optional[Union[str, Dict[str, str]]] = Field(default=None, alias="as")
    constraint: Optional[str] = None
    index: Optional[List[str]] = None
    description: Optional[str] = None
    format: Optional[str] = None
    read_only: bool = Field(default=False, alias="readOnly")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if not data.get("type"):
            data["type"] = ColumnType.STRING.value
        if data.get("format") == "date-time":
            data["type"] = ColumnType.DATE.value
        for flag in ("primaryKey", "primary_key", "unique"):
            if isinstance(data.get(flag), str):
                data[flag] = True
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _type_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.lower()
            if value == "json":
                return ColumnType.OBJECT.value
        return value

    @field_validator("index", mode="before")
    @classmethod
    def _index_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_names(value)
        return value

    @field_validator("description")
    @classmethod
    def _first_line(cls, value: Optional[str]) -> Optional[str]:
        if value and "\n" in value:
            return value.split("\n")[0]
        return value

    @property
    def auto_increment(self) -> bool:
        """Integer primary keys are auto-incremented."""
        return self.primary_key and self.type == ColumnType.INTEGER

    def generated_expression(self, dialect: Dialect) -> Optional[str]:
        """Generated-column SQL for a dialect (None when not generated for it)."""
        if self.as_ is None:
            return None
        if isinstance(self.as_, str):
            return self.as_
        return self.as_.get(dialect.value)


# ============================================================================
# INDEX / RELATION / CONSTRAINT
# ============================================================================

class Index(BaseModel):
    """
    Composite index over ordered columns.

    ``array`` is the position of a JSON-array column rewritten as a CAST so
    membership queries can use the index (multi-valued on MySQL only).
    """

    model_config = {"frozen": True, "populate_by_name": True}

    properties: List[str] = Field(..., min_length=1)
    array: Optional[int] = Field(default=None, ge=0)
    unique: bool = False
    sub_type: Optional[str] = Field(default=None, alias="subType")
    name: Optional[str] = None

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_names(value)
        return value

    @model_validator(mode="after")
    def _array_in_range(self) -> "Index":
        if self.array is not None and self.array >= len(self.properties):
            raise ValueError(
                f"Index array position {self.array} is outside {self.properties}"
            )
        return self


class Relation(BaseModel):
    """Foreign key from a local column to ``target.id``."""

    model_config = {"frozen": True, "populate_by_name": True}

    join: str
    target: str
    type: RelationType = Field(default=RelationType.MANY_TO_ONE)
    delete: Optional[str] = None
    update: Optional[str] = None


class CheckConstraint(BaseModel):
    """Table-level CHECK, optionally limited to one dialect via ``provider``."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: Optional[str] = None
    check: str
    enforced: Optional[bool] = None
    provider: Optional[Dialect] = None
    comment: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def _provider_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            resolved = Dialect.parse(value)
            return resolved if resolved is not None else value
        return value

    def applies_to(self, dialect: Dialect) -> bool:
        return self.provider is None or self.provider == dialect


Constraint = Union[str, CheckConstraint]


# ============================================================================
# SCHEMA
# ============================================================================

class Schema(BaseModel):
    """
    A table.

    ``properties`` order drives column order (and name padding) in DDL.
    ``id`` (JSON ``$id``) and ``etag`` are stamped by the schema generator and
    read by the freshness tracker.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    table: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    properties: Dict[str, Column] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    full_text: List[str] = Field(default_factory=list, alias="fullText")
    indices: List[Index] = Field(default_factory=list)
    relations: Dict[str, Relation] = Field(default_factory=dict)
    constraints: List[Constraint] = Field(default_factory=list)
    id: Optional[str] = Field(default=None, alias="$id")
    etag: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)

        # By default the table name is the type name
        if not data.get("table") and data.get("type"):
            data["table"] = str(data["type"]).lower()

        for key in ("fullText", "full_text"):
            if isinstance(data.get(key), str):
                data[key] = _split_names(data[key])

        # An empty index tag indexes the column itself
        properties = data.get("properties")
        if isinstance(properties, Mapping):
            normalized = {}
            for name, column in properties.items():
                if isinstance(column, Mapping) and isinstance(column.get("index"), str):
                    column = {**column, "index": _split_names(column["index"] or name)}
                normalized[name] = column
            data["properties"] = normalized
        return data

    @model_validator(mode="after")
    def _references_exist(self) -> "Schema":
        known = self.properties

        def check(names, where: str) -> None:
            for name in names:
                if name not in known:
                    raise ValueError(f"{where} references undeclared column '{name}'")

        check(self.required, "required")
        check(self.full_text, "fullText")
        for index in self.indices:
            check(index.properties, "index")
        for column_name, column in self.properties.items():
            if column.index:
                check(column.index, f"index of column '{column_name}'")
        for relation_name, relation in self.relations.items():
            check([relation.join], f"relation '{relation_name}'")
        return self

    @property
    def table_name(self) -> Optional[str]:
        return self.table or (self.type.lower() if self.type else None)

    def is_required(self, name: str) -> bool:
        return name in self.required

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the JSON keys used by stored schema files."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude_defaults=True)

    @classmethod
    def parse(cls, data: Union["Schema", Mapping[str, Any]]) -> "Schema":
        """
        Coerce a mapping (e.g. loaded JSON) into a Schema.

        Raises:
            SchemaError: If the mapping is not a valid schema
        """
        if isinstance(data, Schema):
            return data
        if not isinstance(data, Mapping):
            raise SchemaError(f"Schema must be a mapping, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            table = data.get("table") or data.get("type")
            raise SchemaError(f"Invalid schema '{table}': {e}", table=table) from e


__all__ = [
    "Column",
    "Index",
    "Relation",
    "CheckConstraint",
    "Constraint",
    "Schema",
]
