import json

import pytest

from openapi_to_doc.transformer.content import ContentGroup, group_content
from openapi_to_doc.transformer.samples import (
    SampleGenerationError,
    generate_sample,
    resolve_samples,
    serialize_value,
)


def _group(**kwargs) -> ContentGroup:
    defaults = dict(
        content_types=["application/json"],
        schema={"type": "object", "properties": {"id": {"type": "integer"}}},
        schema_summary="object { id }",
        properties=[],
    )
    defaults.update(kwargs)
    return ContentGroup(**defaults)


class TestGenerateSample:
    def test_object(self):
        schema = {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "active": {"type": "boolean"},
                "created": {"type": "string", "format": "date-time"},
            },
        }
        assert generate_sample(schema) == {
            "id": 0,
            "name": "string",
            "active": True,
            "created": "2023-01-01T00:00:00Z",
        }

    def test_prefers_example_default_and_enum(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"type": "string", "example": "from-example"},
                "b": {"type": "integer", "default": 7},
                "c": {"type": "string", "enum": ["red", "green"]},
            },
        }
        assert generate_sample(schema) == {"a": "from-example", "b": 7, "c": "red"}

    def test_array(self):
        schema = {"type": "array", "items": {"type": "string", "format": "email"}}
        assert generate_sample(schema) == ["user@example.com"]

    def test_composed_schema(self):
        schema = {"allOf": [{"properties": {"id": {"type": "integer"}}}, {"properties": {"n": {"type": "number"}}}]}
        assert generate_sample(schema) == {"id": 0, "n": 0.0}

    def test_recursive_schema_terminates(self):
        node = {"type": "object", "properties": {"name": {"type": "string"}}}
        node["properties"]["child"] = node
        sample = generate_sample(node, max_depth=2)
        assert sample["child"]["child"] == {}

    def test_untyped_schema_is_unsupported(self):
        with pytest.raises(SampleGenerationError):
            generate_sample({})

    def test_non_dict_is_unsupported(self):
        with pytest.raises(SampleGenerationError):
            generate_sample("string")


class TestSerializeValue:
    def test_string_passes_through(self):
        assert serialize_value("<user/>") == "<user/>"

    def test_json_with_indent(self):
        assert serialize_value({"a": 1}) == '{\n  "a": 1\n}'

    def test_non_ascii_is_kept(self):
        assert serialize_value({"name": "홍길동"}) == '{\n  "name": "홍길동"\n}'


class TestResolveSamples:
    def test_named_examples_take_priority(self):
        content = {
            "application/json": {
                "schema": {"type": "object"},
                "examples": {"A": {"summary": "First", "value": {"id": 1}}},
                "example": {"id": 99},
            }
        }
        group = group_content(content)[0]
        samples = resolve_samples(group)
        assert len(samples) == 1
        assert samples[0].name == "A"
        assert samples[0].summary == "First"
        assert json.loads(samples[0].value) == {"id": 1}

    def test_unnamed_example_used_without_named_ones(self):
        group = group_content({"application/json": {"schema": {"type": "object"}, "example": {"id": 99}}})[0]
        samples = resolve_samples(group)
        assert len(samples) == 1
        assert samples[0].name is None
        assert json.loads(samples[0].value) == {"id": 99}

    def test_external_value(self):
        group = _group(named_examples={"remote": {"externalValue": "https://example.com/user.json"}})
        assert resolve_samples(group)[0].value == "https://example.com/user.json"

    def test_generates_when_nothing_declared(self):
        samples = resolve_samples(_group())
        assert json.loads(samples[0].value) == {"id": 0}

    def test_uses_injected_generator(self):
        samples = resolve_samples(_group(), sample_generator=lambda schema: {"custom": True})
        assert json.loads(samples[0].value) == {"custom": True}

    def test_generator_failure_yields_no_sample(self):
        def broken(schema):
            raise RuntimeError("boom")

        assert resolve_samples(_group(), sample_generator=broken) == []

    def test_unserializable_generated_value_yields_no_sample(self):
        value = {}
        value["self"] = value
        assert resolve_samples(_group(), sample_generator=lambda schema: value) == []

    def test_file_groups_are_not_generated(self):
        group = _group(content_types=["application/octet-stream"], is_file=True)
        assert resolve_samples(group) == []

    def test_file_groups_keep_declared_examples(self):
        group = _group(content_types=["multipart/form-data"], is_file=True, example="raw", has_example=True)
        assert resolve_samples(group)[0].value == "raw"

    def test_missing_schema_has_no_sample(self):
        assert resolve_samples(_group(schema=None)) == []
