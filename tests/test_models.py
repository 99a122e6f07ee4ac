from openapi_to_doc.errors import EXIT_CODES, AppError, ErrorCode
from openapi_to_doc.parser.base import (
    ApiDocument,
    ApiEndpoint,
    ApiMeta,
    Param,
    PropertyRecord,
    ResponseInfo,
)


class TestParam:
    def test_create_required_param(self):
        p = Param(name="id", location="path", required=True, param_type="integer")
        assert p.name == "id"
        assert p.required is True
        assert p.description is None
        assert p.example is None

    def test_defaults(self):
        p = Param(name="q", location="query")
        assert p.required is False
        assert p.param_type == "string"


class TestPropertyRecord:
    def test_simple_property_dump_has_no_children_key(self):
        prop = PropertyRecord(name="id", type="integer", required=True)
        assert prop.model_dump(exclude_none=True) == {"name": "id", "type": "integer", "required": True}

    def test_nested_children(self):
        prop = PropertyRecord(
            name="owner",
            type="object",
            children=[PropertyRecord(name="name", type="string")],
        )
        assert prop.children[0].name == "name"
        assert prop.model_dump()["children"][0]["children"] is None


class TestApiEndpoint:
    def test_create_minimal_endpoint(self):
        ep = ApiEndpoint(method="GET", path="/api/users")
        assert ep.summary == ""
        assert ep.parameters == []
        assert ep.request_bodies == []
        assert ep.deprecated is False

    def test_document_serialization_roundtrip(self):
        doc = ApiDocument(
            meta=ApiMeta(title="T", version="1"),
            endpoints=[
                ApiEndpoint(
                    method="DELETE",
                    path="/api/users/{id}",
                    parameters=[Param(name="id", location="path", required=True, param_type="integer")],
                    responses=[ResponseInfo(status_code="204", description="Deleted")],
                )
            ],
        )
        doc2 = ApiDocument.model_validate_json(doc.model_dump_json(exclude_none=True))
        assert doc2 == doc


class TestAppError:
    def test_exit_codes(self):
        assert AppError(ErrorCode.FILE_NOT_FOUND, "x").exit_code == 1
        assert AppError(ErrorCode.INVALID_OPENAPI, "x").exit_code == 2
        assert AppError(ErrorCode.WRITE_ERROR, "x").exit_code == 3

    def test_every_code_has_an_exit_code(self):
        assert set(EXIT_CODES) == set(ErrorCode)

    def test_message_and_hint(self):
        err = AppError(ErrorCode.FILE_EXISTS, "exists", "use --force")
        assert str(err) == "exists"
        assert err.hint == "use --force"
