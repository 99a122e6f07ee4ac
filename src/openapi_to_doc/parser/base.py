"""Unified data models for normalized API documents.

The transformer turns a dereferenced OpenAPI document into these models;
renderers and the CLI only ever read them.
"""

from pydantic import BaseModel


class PropertyRecord(BaseModel):
    """A single flattened schema field.

    ``children`` stays ``None`` for simple shapes and is a list for objects
    and arrays of objects (empty when the depth bound cut the recursion).
    """

    name: str
    type: str  # string / integer / object / array<string> / ...
    format: str | None = None
    required: bool = False
    description: str | None = None
    children: list["PropertyRecord"] | None = None


class Sample(BaseModel):
    """A declared example or generated sample, serialized to text."""

    name: str | None = None
    summary: str | None = None
    value: str


class ContentVariant(BaseModel):
    """One distinct body shape, possibly shared by several content types."""

    content_type: str | None = None  # "application/json, application/xml"
    content_types: list[str] | None = None
    schema_summary: str | None = None
    properties: list[PropertyRecord] = []
    samples: list[Sample] = []


class RequestBodyInfo(ContentVariant):
    required: bool = False


class ResponseInfo(ContentVariant):
    status_code: str
    description: str = ""


class Param(BaseModel):
    """A single API parameter (query, path, header, or cookie)."""

    name: str
    location: str  # query / path / header / cookie
    required: bool = False
    param_type: str = "string"
    format: str | None = None
    description: str | None = None
    example: str | None = None


class ApiEndpoint(BaseModel):
    """A single API operation with all its metadata."""

    method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS
    path: str  # /api/users/{id}
    summary: str = ""
    description: str = ""
    parameters: list[Param] = []
    request_bodies: list[RequestBodyInfo] = []
    responses: list[ResponseInfo] = []
    tags: list[str] = []
    operation_id: str | None = None
    deprecated: bool = False


class ServerInfo(BaseModel):
    url: str
    description: str | None = None


class ApiMeta(BaseModel):
    title: str = ""
    version: str = ""
    description: str = ""
    servers: list[ServerInfo] = []


class SecuritySchemeInfo(BaseModel):
    """A security scheme from ``components.securitySchemes``."""

    name: str
    type: str  # apiKey / http / oauth2 / openIdConnect / mutualTLS
    location: str | None = None  # apiKey only
    parameter_name: str | None = None  # apiKey only
    scheme: str | None = None  # http only
    bearer_format: str | None = None  # http only
    open_id_connect_url: str | None = None
    flows: list[str] = []  # oauth2 flow names
    description: str | None = None


class TagInfo(BaseModel):
    name: str
    description: str | None = None


class ApiDocument(BaseModel):
    """Everything a tabular renderer needs for one API document."""

    meta: ApiMeta
    security_schemes: list[SecuritySchemeInfo] = []
    endpoints: list[ApiEndpoint] = []
    tags: list[TagInfo] = []
