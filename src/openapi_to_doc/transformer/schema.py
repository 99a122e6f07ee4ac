"""Schema flattening: composition resolution and property extraction.

Schemas are plain dicts taken from a dereferenced document. Nothing here
mutates them; composed schemas are collapsed into fresh dicts.

``oneOf`` and ``anyOf`` are merged exactly like ``allOf``. A report should
show every field a caller may have to send, so the union of all variants is
listed rather than the exclusive alternatives.
"""

import logging

from openapi_to_doc.parser.base import PropertyRecord
from openapi_to_doc.transformer.config import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

COMPOSITION_KEYS = ("allOf", "oneOf", "anyOf")

# Name of the synthetic property describing the elements of an array root
ITEMS_PLACEHOLDER = "(items)"

# Guards schemas composed of themselves once references are expanded
MAX_COMPOSITION_NESTING = 16


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def is_composed(schema) -> bool:
    return isinstance(schema, dict) and any(key in schema for key in COMPOSITION_KEYS)


def resolve_schema(schema):
    """Collapse allOf/oneOf/anyOf into one effective schema.

    Schemas without composition keys are returned unchanged (same object).
    """
    return _resolve(schema, 0)


def _resolve(schema, nesting: int):
    if not is_composed(schema):
        return schema

    merged = {key: value for key, value in schema.items() if key not in COMPOSITION_KEYS}
    properties = dict(_as_dict(schema.get("properties")))
    required: list = []
    _add_required(required, schema.get("required"))

    if nesting >= MAX_COMPOSITION_NESTING:
        logger.debug("Composition nested deeper than %d levels, ignoring branches", nesting)
    else:
        for key in COMPOSITION_KEYS:
            branches = schema.get(key)
            if not isinstance(branches, list):
                continue
            for branch in branches:
                if not isinstance(branch, dict):
                    continue
                resolved = _resolve(branch, nesting + 1)
                properties.update(_as_dict(resolved.get("properties")))
                _add_required(required, resolved.get("required"))
                if merged.get("type") is None and resolved.get("type") is not None:
                    merged["type"] = resolved["type"]
                if merged.get("items") is None and resolved.get("items") is not None:
                    merged["items"] = resolved["items"]

    merged.pop("properties", None)
    merged.pop("required", None)
    if properties:
        merged["properties"] = properties
    if required:
        merged["required"] = required
    return merged


def _add_required(required: list, names) -> None:
    if not isinstance(names, list):
        return
    for name in names:
        if isinstance(name, str) and name not in required:
            required.append(name)


def base_type(schema: dict) -> str:
    """Base type of an already-resolved schema."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1: type: [string, "null"]
        concrete = [t for t in schema_type if t != "null"]
        schema_type = concrete[0] if concrete else (schema_type[0] if schema_type else None)
    if isinstance(schema_type, str) and schema_type:
        return schema_type
    if _as_dict(schema.get("properties")):
        return "object"
    if isinstance(schema.get("items"), dict):
        return "array"
    return "unknown"


def type_summary(schema, max_depth: int = DEFAULT_MAX_DEPTH, _nesting: int = 0) -> str:
    """Short type text: ``integer``, ``object``, ``array<string>``, ..."""
    if not isinstance(schema, dict):
        return "unknown"
    resolved = resolve_schema(schema)
    name = base_type(resolved)
    if name != "array":
        return name

    items = resolved.get("items")
    if not isinstance(items, dict):
        return "array"
    if _nesting >= max_depth and base_type(resolve_schema(items)) == "array":
        return "array<...>"
    return f"array<{type_summary(items, max_depth, _nesting + 1)}>"


def schema_to_string(schema, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """One-line summary of a body or response schema."""
    if not isinstance(schema, dict):
        return ""
    resolved = resolve_schema(schema)
    name = base_type(resolved)

    if name == "array":
        return type_summary(resolved, max_depth)
    if name == "object":
        prop_names = list(_as_dict(resolved.get("properties")))
        if prop_names:
            more = ", ..." if len(prop_names) > 3 else ""
            return f"object {{ {', '.join(str(n) for n in prop_names[:3])}{more} }}"
        return "object"
    return name


def _child_schema(resolved: dict, max_depth: int, _nesting: int = 0):
    """The schema whose properties become children, or None for simple shapes."""
    if _as_dict(resolved.get("properties")):
        return resolved
    if base_type(resolved) == "array" and isinstance(resolved.get("items"), dict):
        items = resolve_schema(resolved["items"])
        if _as_dict(items.get("properties")):
            return items
        if base_type(items) == "array" and _nesting < max_depth:
            # array of arrays of objects
            return _child_schema(items, max_depth, _nesting + 1)
    return None


def extract_properties(schema, depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> list[PropertyRecord]:
    """Flatten a schema into property records, nesting children up to ``max_depth``."""
    if not isinstance(schema, dict) or depth > max_depth:
        return []

    resolved = resolve_schema(schema)
    required_names: list = []
    _add_required(required_names, resolved.get("required"))
    required = set(required_names)

    records = [
        _property_record(str(name), prop_schema, name in required, depth, max_depth)
        for name, prop_schema in _as_dict(resolved.get("properties")).items()
    ]

    if base_type(resolved) == "array" and isinstance(resolved.get("items"), dict):
        records.append(_property_record(ITEMS_PLACEHOLDER, resolved["items"], False, depth, max_depth))

    return records


def _property_record(name: str, schema, required: bool, depth: int, max_depth: int) -> PropertyRecord:
    if not isinstance(schema, dict):
        return PropertyRecord(name=name, type="unknown", required=required)

    resolved = resolve_schema(schema)
    children = None
    child_schema = _child_schema(resolved, max_depth)
    if child_schema is not None:
        children = extract_properties(child_schema, depth + 1, max_depth)

    return PropertyRecord(
        name=name,
        type=type_summary(resolved, max_depth),
        format=_text(resolved.get("format")),
        required=required,
        description=_text(resolved.get("description")),
        children=children,
    )
