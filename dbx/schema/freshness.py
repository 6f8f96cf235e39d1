# ============================================================================
# SCHEMA FRESHNESS TRACKER
# ============================================================================
# STATUS: Core - Schema generation and staleness checks
# PURPOSE: Stamp generated schemas and decide when they must be regenerated
# CREATED: 17 OCT 2026
# EXPORTS: is_outdated, outdated_schemas, content_etag, generate_schemas,
#          ensure_schemas, enhance_schema, load_schemas, BASE_COLUMNS
# DEPENDENCIES: dbx.models
# ============================================================================
"""
Schema Freshness Tracker.

A generated schema records where it came from and when:

    $id:  file://./models/account.py#2026-10-17T09:30:12
    etag: "1f4-2jmj7l5rSw0yVb/vlWAYkK/YBwk"

``is_outdated`` first compares the stamp with the source file's mtime (a
stat call) and only reads the file to recompute the etag when the stamp is
not older. Timestamps are UTC, truncated to seconds.

Filesystem errors (missing or unreadable source) propagate to the caller.
"""

import base64
import hashlib
import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from dbx.config import get_defaults
from dbx.errors import SchemaError
from dbx.logging import ComponentType, get_logger, log_context
from dbx.models.schema import Schema

logger = get_logger(__name__, ComponentType.FRESHNESS)

PathLike = Union[str, Path]

# Produces raw schemas (JSON mappings or Schema values) keyed by class name
SchemaGenerator = Callable[[Mapping[str, str], Optional[str]], Mapping[str, Any]]

FILE_SCHEME = "file://"
RELATIVE_PREFIX = "file://./"
STAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Standard columns added by enhance_schema
BASE_COLUMNS: Dict[str, Dict[str, Any]] = {
    "id": {
        "type": "integer",
        "primaryKey": True,
        "description": "Unique identifier, auto-generated. It's the primary key.",
    },
    "inserted": {
        "type": "date",
        "dateOn": "insert",
        "index": ["inserted"],
        "description": "Timestamp when current record is inserted",
    },
    "updated": {
        "type": "date",
        "dateOn": "update",
        "index": ["updated"],
        "description": "Timestamp when current record is updated",
    },
    "etag": {
        "type": "string",
        "maxLength": 1024,
        "description": "Possible ETag for all resources that are external. Allows for better synch-ing.",
    },
}


# ============================================================================
# STAMPS
# ============================================================================

def _format_stamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(STAMP_FORMAT)


def content_etag(path: PathLike) -> str:
    """
    Strong etag of a file's content: ``"<size hex>-<base64 sha1 prefix>"``.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    data = Path(path).read_bytes()
    digest = base64.b64encode(hashlib.sha1(data).digest()).decode("ascii")
    return f'"{len(data):x}-{digest[:27]}"'


def source_path(schema_id: str, base_path: Optional[PathLike] = None) -> Path:
    """
    Resolve the source file referenced by a ``$id``.

    Args:
        schema_id: ``file://<path>#<stamp>``
        base_path: Absolute directory for ``file://./`` ids

    Raises:
        SchemaError: If the id is not a file URL, or a relative id has no absolute base
    """
    location = schema_id.split("#", 1)[0]
    if location.startswith(RELATIVE_PREFIX):
        if base_path is None or not Path(base_path).is_absolute():
            raise SchemaError(f"Base path must be absolute to resolve '{schema_id}', got {base_path!r}")
        return Path(base_path) / location[len(RELATIVE_PREFIX):]
    if location.startswith(FILE_SCHEME):
        return Path(location[len(FILE_SCHEME):])
    raise SchemaError(f"Schema id '{schema_id}' is not a file URL")


# ============================================================================
# FRESHNESS
# ============================================================================

def is_outdated(schema: Union[Schema, Mapping[str, Any]], base_path: Optional[PathLike] = None) -> bool:
    """
    Check if a generated schema must be regenerated from its source.

    Args:
        schema: Schema carrying ``$id`` and ``etag``
        base_path: Absolute directory for relative ids

    Returns:
        True if the source is newer than the stamp or its content changed

    Raises:
        SchemaError: If the schema has no ``$id``
        FileNotFoundError: If the source file is gone
    """
    schema = Schema.parse(schema)
    if not schema.id:
        raise SchemaError(
            f"Schema '{schema.table_name}' must have an '$id' to check if it is outdated",
            table=schema.table_name,
            field="$id",
        )

    path = source_path(schema.id, base_path)
    stamp = schema.id.split("#", 1)[1] if "#" in schema.id else ""

    with log_context(table=schema.table_name, schema_id=schema.id, operation="is_outdated"):
        modified = _format_stamp(datetime.fromtimestamp(path.stat().st_mtime, timezone.utc))
        if stamp < modified:
            logger.debug(f"{path} modified at {modified}, schema stamped {stamp or 'never'}")
            return True

        etag = content_etag(path)
        if etag != schema.etag:
            logger.debug(f"{path} content changed ({schema.etag} -> {etag})")
            return True
    return False


def outdated_schemas(
    schemas: Mapping[str, Union[Schema, Mapping[str, Any]]],
    base_path: Optional[PathLike] = None,
    max_workers: Optional[int] = None,
) -> List[str]:
    """
    Names of the outdated schemas, in input order.

    Checks are independent and run on a thread pool.
    """
    if not schemas:
        return []
    workers = max_workers or get_defaults().freshness.max_workers
    names = list(schemas)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        flags = list(pool.map(lambda name: is_outdated(schemas[name], base_path), names))
    outdated = [name for name, flag in zip(names, flags) if flag]
    logger.info(f"{len(outdated)} of {len(names)} schemas outdated")
    return outdated


# ============================================================================
# GENERATION
# ============================================================================

def enhance_schema(
    schema: Union[Schema, Mapping[str, Any]],
    selected: Optional[Iterable[str]] = None,
) -> Schema:
    """
    Add the standard base columns a schema does not declare yet.

    Added columns come first, in ``selected`` order, ahead of the declared ones.

    Args:
        schema: Schema to enhance
        selected: Base column names (default from FreshnessDefaults)

    Raises:
        SchemaError: If a selected name is not a base column
    """
    schema = Schema.parse(schema)
    names = list(selected) if selected is not None else list(get_defaults().freshness.base_columns)

    data = schema.to_json_dict()
    declared = data.get("properties", {})
    added = {}
    for name in names:
        if name not in BASE_COLUMNS:
            raise SchemaError(f"'{name}' is not a base column ({', '.join(BASE_COLUMNS)})", field=name)
        if name not in declared:
            added[name] = dict(BASE_COLUMNS[name])

    if not added:
        return schema
    data["properties"] = {**added, **declared}
    return Schema.parse(data)


def _stamp(raw: Union[Schema, Mapping[str, Any]], type_name: str, schema_id: str, etag: str) -> Schema:
    data = raw.to_json_dict() if isinstance(raw, Schema) else dict(raw)
    data["type"] = type_name
    if not data.get("table"):
        data["table"] = type_name.lower()
    data["$id"] = schema_id
    data["etag"] = etag
    return Schema.parse(data)


def generate_schemas(
    class_files: Mapping[str, str],
    generator: SchemaGenerator,
    base_path: Optional[PathLike] = None,
    enhance: bool = False,
) -> Dict[str, Schema]:
    """
    Generate stamped schemas from class source files.

    Args:
        class_files: Class name to source file (absolute, or relative to base_path)
        generator: Called as ``generator(class_files, base_path)``
        base_path: Directory relative files live in
        enhance: Add the standard base columns

    Returns:
        Class name to Schema
    """
    if generator is None:
        raise SchemaError("A schema generator is required to generate schemas from class files")

    base = str(base_path) if base_path is not None else None
    logger.debug(f"Generating schemas for {list(class_files)} (base={base}, enhance={enhance})")
    raw = generator(class_files, base)

    stamp = _format_stamp(datetime.now(timezone.utc))
    schemas: Dict[str, Schema] = {}
    for name, file in class_files.items():
        if name not in raw:
            raise SchemaError(f"Generator returned no schema for '{name}'", table=name)

        location = Path(file)
        if location.is_absolute():
            schema_id = f"{FILE_SCHEME}{location.as_posix()}#{stamp}"
        else:
            schema_id = f"{RELATIVE_PREFIX}{location.as_posix()}#{stamp}"
            if base_path is not None:
                location = Path(base_path) / location

        with log_context(table=name, operation="generate_schema"):
            schema = _stamp(raw[name], name, schema_id, content_etag(location))
            if enhance:
                schema = enhance_schema(schema)
        schemas[name] = schema

    logger.info(f"Generated {len(schemas)} schemas")
    return schemas


def load_schemas(schemas_file: PathLike) -> Dict[str, Schema]:
    """Read a schemas JSON file written by ``ensure_schemas``."""
    data = json.loads(Path(schemas_file).read_text(encoding="utf-8"))
    return {name: Schema.parse(raw) for name, raw in data.items()}


def ensure_schemas(
    schemas: Optional[Mapping[str, Union[Schema, Mapping[str, Any]]]],
    class_files: Mapping[str, str],
    generator: SchemaGenerator,
    base_path: Optional[PathLike] = None,
    enhance: bool = False,
    schemas_file: Optional[PathLike] = None,
) -> Dict[str, Schema]:
    """
    Return up-to-date schemas, regenerating them only when needed.

    Regenerates when no schemas are given or any of them is outdated, and
    then writes the new set to ``schemas_file`` as JSON when one is given.
    """
    if schemas:
        outdated = outdated_schemas(schemas, base_path)
        if not outdated:
            return {name: Schema.parse(s) for name, s in schemas.items()}
        logger.info(f"Regenerating schemas, outdated: {outdated}")

    fresh = generate_schemas(class_files, generator, base_path, enhance)
    if schemas_file is not None:
        payload = {name: s.to_json_dict() for name, s in fresh.items()}
        Path(schemas_file).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info(f"Wrote {len(fresh)} schemas to {schemas_file}")
    return fresh


__all__ = [
    "BASE_COLUMNS",
    "SchemaGenerator",
    "content_etag",
    "source_path",
    "is_outdated",
    "outdated_schemas",
    "enhance_schema",
    "generate_schemas",
    "load_schemas",
    "ensure_schemas",
]
