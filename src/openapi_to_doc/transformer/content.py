"""Groups the content types of one request body or response by schema shape."""

from dataclasses import dataclass, field
from typing import Any

from openapi_to_doc.parser.base import PropertyRecord
from openapi_to_doc.transformer.config import DEFAULT_MAX_DEPTH
from openapi_to_doc.transformer.schema import extract_properties, schema_to_string
from openapi_to_doc.transformer.signature import build_signature

FILE_PLACEHOLDER = "(file)"

OCTET_STREAM = "application/octet-stream"
MULTIPART_PREFIX = "multipart/"


def is_file_content_type(content_type: str) -> bool:
    """True for raw binary uploads/downloads and multipart forms."""
    lowered = content_type.lower()
    return lowered == OCTET_STREAM or lowered.startswith(MULTIPART_PREFIX)


@dataclass
class ContentGroup:
    """Content types sharing one shape, with their merged declared examples."""

    content_types: list[str]
    schema: dict | None
    schema_summary: str
    properties: list[PropertyRecord]
    is_file: bool = False
    named_examples: dict[str, Any] = field(default_factory=dict)
    example: Any = None
    has_example: bool = False

    @property
    def content_type(self) -> str:
        return ", ".join(self.content_types)

    def add_examples(self, media_type: dict) -> None:
        """Merge a media type's examples; the first one seen under a name wins."""
        examples = media_type.get("examples")
        if isinstance(examples, dict):
            for name, example in examples.items():
                self.named_examples.setdefault(str(name), example)
        if "example" in media_type and not self.has_example:
            self.example = media_type["example"]
            self.has_example = True


def group_content(content: dict, max_depth: int = DEFAULT_MAX_DEPTH) -> list[ContentGroup]:
    """Partition a ``content`` map into groups, in first-seen order."""
    groups: list[ContentGroup] = []
    by_signature: dict[str, ContentGroup] = {}

    for content_type, media_type in content.items():
        content_type = str(content_type)
        media_type = media_type if isinstance(media_type, dict) else {}
        schema = media_type.get("schema")
        if not isinstance(schema, dict):
            schema = None

        schema_text = schema_to_string(schema, max_depth)
        properties = extract_properties(schema, 0, max_depth)

        if is_file_content_type(content_type):
            group = ContentGroup(
                content_types=[content_type],
                schema=schema,
                schema_summary=schema_text or FILE_PLACEHOLDER,
                properties=properties,
                is_file=True,
            )
            group.add_examples(media_type)
            groups.append(group)
            continue

        signature = build_signature(schema_text, properties)
        group = by_signature.get(signature)
        if group is None:
            group = ContentGroup(
                content_types=[content_type],
                schema=schema,
                schema_summary=schema_text,
                properties=properties,
            )
            by_signature[signature] = group
            groups.append(group)
        else:
            group.content_types.append(content_type)
        group.add_examples(media_type)

    return groups
