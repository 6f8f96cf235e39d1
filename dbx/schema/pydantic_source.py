# ============================================================================
# PYDANTIC SCHEMA SOURCE
# ============================================================================
# STATUS: Core - Schema generator for Python class files
# PURPOSE: Load pydantic models from source files and describe them as schemas
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: PydanticSchemaGenerator
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Pydantic Schema Source.

Generator for ``generate_schemas`` / ``ensure_schemas``: every class file is
imported from its path and the named pydantic model is turned into a raw
schema mapping.

Model Metadata Convention:
    Field level (``Field(...)``):
    - annotation -> column type, ``Optional[...]`` -> not required
    - ``max_length`` -> maxLength, ``ge``/``le`` -> minimum/maximum,
      ``gt``/``lt`` -> exclusiveMinimum/exclusiveMaximum
    - ``description`` -> description
    - ``json_schema_extra`` -> column extensions (primaryKey, unique, index,
      dateOn, as, constraint, maxLength, type)

    Class level (ClassVar attributes):
    - __sql_table__: Table name
    - __sql_full_text__: Full-text column list
    - __sql_indices__: List of index definitions
    - __sql_relations__: Dict of relation name -> relation
    - __sql_constraints__: List of table constraints

Usage:
    generator = PydanticSchemaGenerator()
    schemas = generate_schemas({"Account": "models/account.py"}, generator, base_path="/srv/app")
"""

import importlib.util
import sys
import types
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union, get_args, get_origin

from annotated_types import Ge, Gt, Le, Lt, MaxLen
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from dbx.contracts import ColumnType
from dbx.errors import SchemaError
from dbx.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.FRESHNESS)

MODULE_PREFIX = "dbx_schema_source"


class PydanticSchemaGenerator:
    """
    Describe pydantic models found in source files as raw schemas.
    """

    TYPE_MAP = {
        bool: ColumnType.BOOLEAN,
        int: ColumnType.INTEGER,
        float: ColumnType.NUMBER,
        Decimal: ColumnType.NUMBER,
        str: ColumnType.STRING,
        datetime: ColumnType.DATE,
        date: ColumnType.DATE,
        dict: ColumnType.OBJECT,
        Dict: ColumnType.OBJECT,
        list: ColumnType.ARRAY,
        List: ColumnType.ARRAY,
        tuple: ColumnType.ARRAY,
        set: ColumnType.ARRAY,
    }

    def __call__(self, class_files: Mapping[str, str], base_path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        schemas = {}
        for class_name, file in class_files.items():
            path = Path(file)
            if not path.is_absolute() and base_path is not None:
                path = Path(base_path) / path
            model = self.load_model(path, class_name)
            schemas[class_name] = self.describe(model)
        return schemas

    # =========================================================================
    # LOADING
    # =========================================================================

    @staticmethod
    def load_model(path: Path, class_name: str) -> Type[BaseModel]:
        """
        Import a source file and return one of its pydantic models.

        The file is executed again on every call so edits are picked up.

        Raises:
            FileNotFoundError: If the file does not exist
            SchemaError: If the class is missing or not a pydantic model
        """
        if not path.exists():
            raise FileNotFoundError(f"Class file not found: {path}")

        module_name = f"{MODULE_PREFIX}.{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise SchemaError(f"Cannot import class file {path}", table=class_name)
        module = importlib.util.module_from_spec(spec)
        # Registered so pydantic can resolve postponed annotations
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

        model = getattr(module, class_name, None)
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise SchemaError(f"{path} does not define a pydantic model '{class_name}'", table=class_name)
        logger.debug(f"Loaded {class_name} from {path}")
        return model

    # =========================================================================
    # METADATA EXTRACTION
    # =========================================================================

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract table-level metadata from the ``__sql_*`` attributes.

        Returns:
            Dict of schema keys (table, fullText, indices, relations, constraints)
        """
        def get_attr(name: str, default=None):
            mangled = f"_{model.__name__}__{name}"
            return getattr(model, mangled, getattr(model, f"__{name}__", default))

        metadata = {
            "table": get_attr("sql_table"),
            "fullText": get_attr("sql_full_text"),
            "indices": get_attr("sql_indices"),
            "relations": get_attr("sql_relations"),
            "constraints": get_attr("sql_constraints"),
        }
        return {key: value for key, value in metadata.items() if value}

    # =========================================================================
    # TYPE CONVERSION
    # =========================================================================

    @staticmethod
    def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
        """Strip ``Optional``; returns (inner annotation, accepts None)."""
        origin = get_origin(annotation)
        if origin is Union or origin is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            optional = len(args) != len(get_args(annotation))
            return (args[0] if len(args) == 1 else Any), optional
        return annotation, False

    def python_type_to_column_type(self, annotation: Any) -> ColumnType:
        """Map a (non-optional) annotation to a column type. Unknown types are strings."""
        origin = get_origin(annotation)
        if origin is not None:
            return self.TYPE_MAP.get(origin, ColumnType.STRING)
        if not isinstance(annotation, type):
            return ColumnType.STRING
        # bool before int, str-based enums are strings
        for python_type, column_type in self.TYPE_MAP.items():
            if isinstance(python_type, type) and issubclass(annotation, python_type):
                return column_type
        if issubclass(annotation, BaseModel):
            return ColumnType.OBJECT
        return ColumnType.STRING

    @staticmethod
    def _default(field_info: FieldInfo) -> Any:
        default = field_info.default
        if default is not PydanticUndefined and default is not None:
            return default.value if isinstance(default, Enum) else default
        if field_info.default_factory is not None and not field_info.default_factory_takes_validated_data:
            # Only container literals become column defaults
            value = field_info.default_factory()
            if isinstance(value, (dict, list)) and value:
                return value
        return None

    def describe_field(self, field_info: FieldInfo) -> Tuple[Dict[str, Any], bool]:
        """
        Describe one model field as a column mapping.

        Returns:
            Tuple of (column mapping, required)
        """
        annotation, optional = self.unwrap_optional(field_info.annotation)
        column: Dict[str, Any] = {"type": self.python_type_to_column_type(annotation).value}

        for constraint in field_info.metadata:
            if isinstance(constraint, MaxLen):
                column["maxLength"] = constraint.max_length
            elif isinstance(constraint, Ge):
                column["minimum"] = constraint.ge
            elif isinstance(constraint, Gt):
                column["exclusiveMinimum"] = constraint.gt
            elif isinstance(constraint, Le):
                column["maximum"] = constraint.le
            elif isinstance(constraint, Lt):
                column["exclusiveMaximum"] = constraint.lt

        default = self._default(field_info)
        if default is not None:
            column["default"] = default
        if field_info.description:
            column["description"] = field_info.description

        extra = field_info.json_schema_extra
        if isinstance(extra, dict):
            column.update(extra)
        return column, not optional

    def describe(self, model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Describe a pydantic model as a raw schema mapping.
        """
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, field_info in model.model_fields.items():
            column_name = field_info.alias or name
            column, is_required = self.describe_field(field_info)
            properties[column_name] = column
            if is_required:
                required.append(column_name)

        schema: Dict[str, Any] = {
            "type": model.__name__,
            "properties": properties,
            "required": required,
        }
        doc = model.__dict__.get("__doc__")
        if doc and doc.strip():
            schema["description"] = doc.strip().split("\n")[0]
        schema.update(self.get_model_metadata(model))
        return schema


__all__ = [
    "PydanticSchemaGenerator",
]
