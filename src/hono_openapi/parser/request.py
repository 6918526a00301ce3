"""Request data extraction: the JSON body and query parameters a handler reads."""

from typing import NamedTuple

from tree_sitter import Node

from hono_openapi.schema.models import ObjectSchema, PrimitiveSchema, SchemaNode
from hono_openapi.schema.synth import type_to_schema

from .nodes import (
    call_arguments,
    member_name,
    member_object,
    named_children,
    resolve_identifier_to_init,
    string_literal_value,
    strip_parens_and_casts,
    text,
    walk,
)
from .oracle import TypeOracle
from .zod import is_zod_object_call, zod_object_to_schema

PARSE_METHODS = {"parse", "safeParse"}


class RequestData(NamedTuple):
    body_schema: SchemaNode | None
    query_schema: ObjectSchema | None


def is_request_call(call: Node, ctx_name: str | None, method: str) -> bool:
    """Is ``call`` a ``<ctx>.req.<method>(...)`` call?"""
    if call.type != "call_expression":
        return False
    callee = call.child_by_field_name("function")
    if member_name(callee) != method:
        return False
    base = strip_parens_and_casts(member_object(callee))
    if member_name(base) != "req":
        return False
    if not ctx_name:
        return True
    target = strip_parens_and_casts(member_object(base))
    return target.type == "identifier" and text(target) == ctx_name


def _awaited_call(node: Node) -> Node | None:
    node = strip_parens_and_casts(node)
    if node.type == "await_expression":
        inner = named_children(node)
        node = strip_parens_and_casts(inner[0]) if inner else node
    return node if node.type == "call_expression" else None


class _QueryAccumulator:
    def __init__(self):
        self.properties: dict[str, SchemaNode] = {}
        self.required: list[str] = []

    def merge_object(self, schema: SchemaNode) -> None:
        if not isinstance(schema, ObjectSchema):
            return
        self.properties.update(schema.properties)
        for name in schema.required:
            if name not in self.required:
                self.required.append(name)

    def add(self, name: str) -> None:
        self.properties[name] = PrimitiveSchema(type="string")

    def schema(self) -> ObjectSchema | None:
        if not self.properties:
            return None
        return ObjectSchema(properties=self.properties, required=self.required)


def extract_request_data(oracle: TypeOracle, body: Node | None, ctx_name: str | None = None) -> RequestData:
    """Find the request body schema and query parameters used by a handler body."""
    if body is None:
        return RequestData(None, None)
    body_schema: SchemaNode | None = None
    query = _QueryAccumulator()

    for node in walk(body):
        if node.type == "variable_declarator":
            value = node.child_by_field_name("value")
            call = _awaited_call(value) if value is not None else None
            if call is not None:
                annotation = node.child_by_field_name("type")
                declared = type_to_schema(oracle.type_from_annotation(annotation)) if annotation is not None else None
                if body_schema is None and is_request_call(call, ctx_name, "json"):
                    body_schema = declared or type_to_schema(oracle.type_of(value))
                if declared is not None and is_request_call(call, ctx_name, "query"):
                    query.merge_object(declared)

        elif node.type == "call_expression":
            callee = node.child_by_field_name("function")
            args = call_arguments(node)
            if member_name(callee) in PARSE_METHODS and args and body_schema is None:
                inner = _awaited_call(args[0])
                if inner is not None and is_request_call(inner, ctx_name, "json"):
                    target = member_object(callee)
                    init = target if is_zod_object_call(target) else resolve_identifier_to_init(target)
                    if is_zod_object_call(init):
                        body_schema = zod_object_to_schema(init)
            if is_request_call(node, ctx_name, "query") and args:
                name = string_literal_value(args[0])
                if name is not None:
                    query.add(name)

    return RequestData(body_schema, query.schema())
