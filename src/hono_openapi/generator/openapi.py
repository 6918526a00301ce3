"""Document assembler: folds RouteRecords into one OpenAPI 3.0 document."""

import json
from http import HTTPStatus

import yaml

from hono_openapi.parser.base import ResponseRecord, RouteRecord
from hono_openapi.routing.paths import extract_path_params, to_openapi_path
from hono_openapi.schema.synth import type_text_to_schema

OPENAPI_VERSION = "3.0.1"
DEFAULT_TITLE = "hono-openapi"
DEFAULT_VERSION = "0.1.0"
DEFAULT_MEDIA_TYPE = "application/json"


def _description(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Response"


def _render_response(record: ResponseRecord) -> tuple[str, dict]:
    status = record.status or 200
    rendered: dict = {"description": _description(status)}
    if record.headers:
        rendered["headers"] = record.headers
    if record.content_schema is not None:
        media_type = record.media_type or DEFAULT_MEDIA_TYPE
        rendered["content"] = {media_type: {"schema": record.content_schema.to_openapi()}}
    return str(status), rendered


def _legacy_response(route: RouteRecord) -> dict:
    schema = route.response_schema or type_text_to_schema(route.response_type_text)
    rendered: dict = {"description": "OK"}
    if schema is not None:
        rendered["content"] = {DEFAULT_MEDIA_TYPE: {"schema": schema.to_openapi()}}
    return {"200": rendered}


def _build_operation(group: list[RouteRecord]) -> dict:
    operation: dict = {}
    parameters: list[dict] = []
    seen: set[tuple[str, str]] = set()

    def add_parameter(name: str, location: str, required: bool, schema: dict) -> None:
        if (name, location) in seen:
            return
        seen.add((name, location))
        parameters.append({"name": name, "in": location, "required": required, "schema": schema})

    for route in group:
        for name in route.path_params or extract_path_params(route.path):
            add_parameter(name, "path", True, {"type": "string"})
    for route in group:
        if route.query_schema is not None:
            required = set(route.query_schema.required)
            for name, schema in route.query_schema.properties.items():
                add_parameter(name, "query", name in required, schema.to_openapi())
    if parameters:
        operation["parameters"] = parameters

    scopes: list[str] = []
    for route in group:
        for scope in route.middleware_scopes or []:
            if scope not in scopes:
                scopes.append(scope)
    if scopes:
        operation["tags"] = scopes
        operation["description"] = f"Middleware applied from: {', '.join(scopes)}"

    body = next((r.request_body_schema for r in group if r.request_body_schema is not None), None)
    if body is not None:
        operation["requestBody"] = {
            "required": True,
            "content": {DEFAULT_MEDIA_TYPE: {"schema": body.to_openapi()}},
        }

    records = [record for route in group for record in route.responses]
    if records:
        responses: dict[str, dict] = {}
        for record in records:
            code, rendered = _render_response(record)
            responses[code] = rendered  # same status twice: last one wins
        operation["responses"] = responses
    else:
        operation["responses"] = _legacy_response(group[-1])
    return operation


def routes_to_openapi(routes: list[RouteRecord], title: str = DEFAULT_TITLE, version: str = DEFAULT_VERSION) -> dict:
    """Build the OpenAPI document for all discovered routes."""
    groups: dict[tuple[str, str], list[RouteRecord]] = {}
    for route in routes:
        groups.setdefault((to_openapi_path(route.path), route.method), []).append(route)

    paths: dict[str, dict] = {}
    for (path, method), group in groups.items():
        paths.setdefault(path, {})[method] = _build_operation(group)

    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "paths": paths,
    }


def dump_document(document: dict, fmt: str = "json") -> str:
    """Serialize a document as JSON or YAML."""
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
