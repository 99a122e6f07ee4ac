"""Endpoint normalizer.

Walks a dereferenced OpenAPI 3 document and builds the flat ``ApiDocument``
model: one ``ApiEndpoint`` per operation, with parameters, grouped request
bodies and responses, and the document-level metadata.
"""

import json
import logging
from functools import partial
from typing import Any
from urllib.parse import quote

from openapi_to_doc.parser.base import (
    ApiDocument,
    ApiEndpoint,
    ApiMeta,
    Param,
    RequestBodyInfo,
    ResponseInfo,
    SecuritySchemeInfo,
    ServerInfo,
    TagInfo,
)
from openapi_to_doc.transformer.config import NormalizerConfig
from openapi_to_doc.transformer.content import ContentGroup, group_content
from openapi_to_doc.transformer.samples import SampleGenerator, generate_sample, resolve_samples
from openapi_to_doc.transformer.schema import resolve_schema, type_summary

logger = logging.getLogger(__name__)

_MISSING = object()

# Characters encodeURIComponent leaves alone besides the unreserved set
_QUERY_SAFE = "!'()*"


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _text(value) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _encode(value: Any) -> str:
    return quote(_scalar_text(value), safe=_QUERY_SAFE)


def format_query_example(name: str, value: Any, style: str | None = None, explode: bool | None = None) -> str:
    """Render a query parameter example the way it appears in a URL.

    ``explode`` defaults to true for the default ``form`` style.
    """
    style = style or "form"
    if explode is None:
        explode = style == "form"

    if isinstance(value, list):
        if explode:
            return "&".join(f"{name}={_encode(item)}" for item in value)
        return f"{name}={','.join(_encode(item) for item in value)}"

    if isinstance(value, dict):
        if explode:
            return "&".join(f"{key}={_encode(item)}" for key, item in value.items())
        pairs = ",".join(f"{_encode(key)},{_encode(item)}" for key, item in value.items())
        return f"{name}={pairs}"

    return f"{name}={_encode(value)}"


def format_parameter_example(param: dict, value: Any) -> str:
    """Example text for any parameter location."""
    name = str(param.get("name", ""))
    if param.get("in", "query") == "query":
        explode = param.get("explode")
        return format_query_example(
            name,
            value,
            style=_text(param.get("style")),
            explode=explode if isinstance(explode, bool) else None,
        )
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _parameter_schema(param: dict) -> dict:
    schema = param.get("schema")
    if isinstance(schema, dict):
        return schema
    # Parameters may describe themselves through a single-entry content map
    for media_type in _as_dict(param.get("content")).values():
        if isinstance(media_type, dict) and isinstance(media_type.get("schema"), dict):
            return media_type["schema"]
    return {}


def _parameter_example(param: dict, schema: dict) -> Any:
    if "example" in param:
        return param["example"]
    for example in _as_dict(param.get("examples")).values():
        if isinstance(example, dict) and "value" in example:
            return example["value"]
    if "example" in schema:
        return schema["example"]
    return _MISSING


class EndpointNormalizer:
    """Builds an ``ApiDocument`` from a dereferenced OpenAPI 3 document."""

    def __init__(self, config: NormalizerConfig | None = None, sample_generator: SampleGenerator | None = None):
        self.config = config or NormalizerConfig()
        self.sample_generator = sample_generator or partial(generate_sample, max_depth=self.config.max_depth)

    def normalize(self, document: dict) -> ApiDocument:
        """Normalize the whole document. The input is never modified."""
        endpoints = self._extract_endpoints(document)
        logger.debug("Normalized %d endpoints", len(endpoints))
        return ApiDocument(
            meta=self._extract_meta(document),
            security_schemes=self._extract_security_schemes(document),
            endpoints=endpoints,
            tags=self._extract_tags(document),
        )

    def _extract_meta(self, document: dict) -> ApiMeta:
        info = _as_dict(document.get("info"))
        servers = [
            ServerInfo(url=str(server.get("url", "")), description=_text(server.get("description")))
            for server in _as_list(document.get("servers"))
            if isinstance(server, dict)
        ]
        return ApiMeta(
            title=_text(info.get("title")) or "",
            # YAML turns an unquoted 1.0 into a float
            version=_text(info.get("version")) or "",
            description=_text(info.get("description")) or "",
            servers=servers,
        )

    def _extract_security_schemes(self, document: dict) -> list[SecuritySchemeInfo]:
        schemes = _as_dict(_as_dict(document.get("components")).get("securitySchemes"))
        result = []
        for name, scheme in schemes.items():
            if not isinstance(scheme, dict):
                continue
            scheme_type = str(scheme.get("type", ""))
            fields: dict[str, Any] = {}
            if scheme_type == "apiKey":
                fields["location"] = _text(scheme.get("in"))
                fields["parameter_name"] = _text(scheme.get("name"))
            elif scheme_type == "http":
                fields["scheme"] = _text(scheme.get("scheme"))
                fields["bearer_format"] = _text(scheme.get("bearerFormat"))
            elif scheme_type == "oauth2":
                fields["flows"] = [str(flow) for flow in _as_dict(scheme.get("flows"))]
            elif scheme_type == "openIdConnect":
                fields["open_id_connect_url"] = _text(scheme.get("openIdConnectUrl"))
            result.append(
                SecuritySchemeInfo(
                    name=str(name),
                    type=scheme_type,
                    description=_text(scheme.get("description")),
                    **fields,
                )
            )
        return result

    def _extract_tags(self, document: dict) -> list[TagInfo]:
        return [
            TagInfo(name=str(tag.get("name", "")), description=_text(tag.get("description")))
            for tag in _as_list(document.get("tags"))
            if isinstance(tag, dict)
        ]

    def _extract_endpoints(self, document: dict) -> list[ApiEndpoint]:
        endpoints = []
        for path, path_item in _as_dict(document.get("paths")).items():
            if not isinstance(path_item, dict):
                continue
            for method in self.config.methods:
                operation = path_item.get(method.lower())
                if isinstance(operation, dict):
                    endpoints.append(self._extract_endpoint(str(path), method, operation, path_item))
        return endpoints

    def _extract_endpoint(self, path: str, method: str, operation: dict, path_item: dict) -> ApiEndpoint:
        # Path-level parameters first; same-named operation parameters are kept as well
        params = _as_list(path_item.get("parameters")) + _as_list(operation.get("parameters"))

        return ApiEndpoint(
            method=method,
            path=path,
            summary=_text(operation.get("summary")) or "",
            description=_text(operation.get("description")) or "",
            parameters=[self._extract_param(param) for param in params if isinstance(param, dict)],
            request_bodies=self._extract_request_bodies(operation.get("requestBody")),
            responses=self._extract_responses(operation.get("responses")),
            tags=[str(tag) for tag in _as_list(operation.get("tags"))],
            operation_id=_text(operation.get("operationId")),
            deprecated=bool(operation.get("deprecated", False)),
        )

    def _extract_param(self, param: dict) -> Param:
        schema = _parameter_schema(param)
        param_type = type_summary(schema, self.config.max_depth)
        if param_type == "unknown":
            param_type = "string"

        example = _parameter_example(param, schema)

        return Param(
            name=str(param.get("name", "")),
            location=str(param.get("in", "query")),
            required=bool(param.get("required", False)),
            param_type=param_type,
            format=_text(resolve_schema(schema).get("format")),
            description=_text(param.get("description")),
            example=None if example is _MISSING else format_parameter_example(param, example),
        )

    def _variant_fields(self, group: ContentGroup) -> dict:
        return {
            "content_type": group.content_type,
            "content_types": list(group.content_types),
            "schema_summary": group.schema_summary,
            "properties": group.properties,
            "samples": resolve_samples(group, self.sample_generator),
        }

    def _extract_request_bodies(self, request_body) -> list[RequestBodyInfo]:
        if not isinstance(request_body, dict):
            return []
        content = _as_dict(request_body.get("content"))
        required = bool(request_body.get("required", False))
        return [
            RequestBodyInfo(required=required, **self._variant_fields(group))
            for group in group_content(content, self.config.max_depth)
        ]

    def _extract_responses(self, responses) -> list[ResponseInfo]:
        result = []
        for status_code, response in _as_dict(responses).items():
            response = _as_dict(response)
            description = _text(response.get("description")) or ""
            content = _as_dict(response.get("content"))

            # No content at all, e.g. 204
            if not content:
                result.append(ResponseInfo(status_code=str(status_code), description=description))
                continue

            for group in group_content(content, self.config.max_depth):
                result.append(
                    ResponseInfo(
                        status_code=str(status_code),
                        description=description,
                        **self._variant_fields(group),
                    )
                )
        return result


def extract_endpoints(document: dict, config: NormalizerConfig | None = None) -> ApiDocument:
    """Normalize a dereferenced OpenAPI 3 document with default collaborators."""
    return EndpointNormalizer(config).normalize(document)
