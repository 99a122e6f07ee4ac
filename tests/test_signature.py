from openapi_to_doc.parser.base import PropertyRecord
from openapi_to_doc.transformer.signature import build_signature


def _prop(name, type_="string", **kwargs):
    return PropertyRecord(name=name, type=type_, **kwargs)


class TestBuildSignature:
    def test_format(self):
        props = [_prop("id", "integer", format="int64", required=True, description="Identifier")]
        assert build_signature("object { id }", props) == "object { id }::id|integer|int64|1|Identifier"

    def test_empty_properties(self):
        assert build_signature("string", []) == "string::"

    def test_order_independent(self):
        a = [_prop("name"), _prop("id", "integer")]
        b = [_prop("id", "integer"), _prop("name")]
        assert build_signature("object", a) == build_signature("object", b)

    def test_sorting_is_case_sensitive_ordinal(self):
        props = [_prop("b"), _prop("B"), _prop("a")]
        assert build_signature("", props) == "::B|string||0|||a|string||0|||b|string||0|"

    def test_does_not_reorder_input(self):
        props = [_prop("z"), _prop("a")]
        build_signature("", props)
        assert [p.name for p in props] == ["z", "a"]

    def test_required_flag_changes_signature(self):
        assert build_signature("", [_prop("id", required=True)]) != build_signature("", [_prop("id")])

    def test_schema_text_changes_signature(self):
        assert build_signature("object", [_prop("id")]) != build_signature("object { id }", [_prop("id")])

    def test_children_are_bracketed(self):
        props = [_prop("owner", "object", children=[_prop("name")])]
        assert build_signature("object", props) == "object::owner|object||0|[::name|string||0|]"

    def test_children_differences_are_detected(self):
        a = [_prop("owner", "object", children=[_prop("name")])]
        b = [_prop("owner", "object", children=[_prop("email")])]
        assert build_signature("object", a) != build_signature("object", b)
