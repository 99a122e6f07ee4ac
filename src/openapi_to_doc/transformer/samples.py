"""Request/response samples: declared examples first, generated ones second.

Sample generation is best effort. Any failure of the generator leaves the
variant without a sample instead of failing the whole document.
"""

import json
import logging
from typing import Any, Callable

from openapi_to_doc.parser.base import Sample
from openapi_to_doc.transformer.config import DEFAULT_MAX_DEPTH
from openapi_to_doc.transformer.content import ContentGroup
from openapi_to_doc.transformer.schema import base_type, resolve_schema

logger = logging.getLogger(__name__)

SampleGenerator = Callable[[dict], Any]

STRING_FORMAT_SAMPLES = {
    "date-time": "2023-01-01T00:00:00Z",
    "date": "2023-01-01",
    "time": "00:00:00",
    "email": "user@example.com",
    "uuid": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
    "uri": "https://example.com",
    "url": "https://example.com",
    "hostname": "example.com",
    "ipv4": "192.0.2.1",
    "ipv6": "2001:db8::1",
    "byte": "c3RyaW5n",
    "binary": "<binary>",
    "password": "********",
}


class SampleGenerationError(ValueError):
    """Raised when a schema has no shape a sample can be built from."""


def generate_sample(schema: dict, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Build an example value matching the shape of ``schema``."""
    if not isinstance(schema, dict):
        raise SampleGenerationError("Schema is not an object")
    resolved = resolve_schema(schema)
    if base_type(resolved) == "unknown" and not _literal_keys(resolved):
        raise SampleGenerationError("Schema has no type to sample")
    return _sample(resolved, 0, max_depth)


def _literal_keys(schema: dict) -> bool:
    return any(key in schema for key in ("example", "default", "const", "enum"))


def _sample(schema: dict, depth: int, max_depth: int) -> Any:
    schema = resolve_schema(schema)

    for key in ("example", "default", "const"):
        if key in schema:
            return schema[key]
    # JSON Schema style examples list (OpenAPI 3.1)
    examples = schema.get("examples")
    if isinstance(examples, list) and examples:
        return examples[0]
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        return enum[0]

    schema_type = base_type(schema)

    if schema_type == "object":
        if depth >= max_depth:
            return {}
        result = {}
        properties = schema.get("properties")
        if isinstance(properties, dict):
            for name, prop_schema in properties.items():
                if isinstance(prop_schema, dict):
                    result[str(name)] = _sample(prop_schema, depth + 1, max_depth)
        additional = schema.get("additionalProperties")
        if not result and isinstance(additional, dict):
            result["key"] = _sample(additional, depth + 1, max_depth)
        return result

    if schema_type == "array":
        items = schema.get("items")
        if depth >= max_depth or not isinstance(items, dict):
            return []
        return [_sample(items, depth + 1, max_depth)]

    if schema_type == "string":
        return STRING_FORMAT_SAMPLES.get(schema.get("format"), "string")
    if schema_type == "integer":
        return schema.get("minimum", 0)
    if schema_type == "number":
        return schema.get("minimum", 0.0)
    if schema_type == "boolean":
        return True
    # null or unknown nested shapes
    return None


def serialize_value(value: Any) -> str:
    """Text form of an example: strings as-is, everything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _named_sample(name: str, example: Any) -> Sample:
    if not isinstance(example, dict):
        return Sample(name=name, value=serialize_value(example))

    summary = example.get("summary")
    if "value" in example:
        value = serialize_value(example["value"])
    elif "externalValue" in example:
        value = str(example["externalValue"])
    else:
        value = ""
    return Sample(name=name, summary=str(summary) if summary is not None else None, value=value)


def resolve_samples(group: ContentGroup, sample_generator: SampleGenerator = generate_sample) -> list[Sample]:
    """Declared examples of a content group, or one generated sample."""
    if group.named_examples:
        return [_named_sample(name, example) for name, example in group.named_examples.items()]
    if group.has_example:
        return [Sample(value=serialize_value(group.example))]
    if group.is_file or group.schema is None:
        return []

    try:
        value = serialize_value(sample_generator(group.schema))
    except Exception as e:
        logger.debug("No sample for %s: %s", group.content_type, e)
        return []
    return [Sample(value=value)]
