"""Data models for statically discovered routes.

The analyzer turns every recognized route registration into a RouteRecord;
the assembler folds the records of all files into one OpenAPI document.
"""

from typing import Literal

from pydantic import BaseModel

from hono_openapi.schema.models import ObjectSchema, SchemaNode

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head")

HttpMethod = Literal["get", "post", "put", "patch", "delete", "options", "head"]


class ResponseRecord(BaseModel):
    """One response-emitting call found in a handler body."""

    status: int | None = None  # None means "not stated", rendered as 200
    content_schema: SchemaNode | None = None
    media_type: str | None = None
    headers: dict | None = None
    type_text: str | None = None  # display text of the json() argument type


class RouteRecord(BaseModel):
    """A single endpoint discovered in source code."""

    method: HttpMethod
    path: str  # /users/:id
    path_params: list[str] = []
    response_type_text: str | None = None
    response_schema: SchemaNode | None = None
    request_body_schema: SchemaNode | None = None
    query_schema: ObjectSchema | None = None
    responses: list[ResponseRecord] = []
    middleware_scopes: list[str] | None = None


class AnalyzerConfig(BaseModel):
    """How strictly route registrations are recognized.

    ``receiver_policy="any"`` accepts any ``x.get('/path', ...)`` call;
    ``"router"`` also requires the receiver's type to be one of
    ``router_types``.
    """

    receiver_policy: Literal["any", "router"] = "any"
    router_types: list[str] = ["Hono", "OpenAPIHono"]
