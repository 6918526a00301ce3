"""Response extraction: finds the calls in a handler body that emit a response.

Recognized shapes: ``c.json``, ``c.text``, ``c.html``, ``c.body``,
``c.notFound``, ``c.redirect`` and ``return new Response(body, init)``.
Each call yields one ResponseRecord per statically known status code.
"""

import re

from tree_sitter import Node

from hono_openapi.schema.models import binary_schema, string_schema
from hono_openapi.schema.synth import type_to_schema

from .base import ResponseRecord
from .nodes import (
    call_arguments,
    member_name,
    member_object,
    named_children,
    property_key,
    resolve_to_string_literal,
    string_literal_value,
    strip_parens_and_casts,
    text,
    walk,
)
from .oracle import TsType, TypeOracle, enum_member_value

BINARY_TYPE_NAMES = {
    "ArrayBuffer", "SharedArrayBuffer", "Uint8Array", "Uint8ClampedArray", "Int8Array", "Int16Array",
    "Uint16Array", "Int32Array", "Uint32Array", "BigInt64Array", "BigUint64Array", "Float32Array",
    "Float64Array", "ReadableStream", "Blob", "File", "FormData",
}
_BINARY_TEXT_RE = re.compile(r"^ReadableStream(<.*>)?$|ArrayBuffer(View)?|Uint8Array|Int8Array|"
                             r"Float(32|64)Array|Big(Uint)?64Array")
_LOCATION_HEADER = {"Location": {"schema": {"type": "string", "format": "uri"}}}


def is_binary_like(t: TsType) -> bool:
    """True for typed arrays, buffers, streams, blobs, files and form data."""
    members = t.union_members()
    if members is not None:
        return any(is_binary_like(m) for m in members)
    name = t.symbol_name()
    if name in BINARY_TYPE_NAMES:
        return True
    if name is None:
        return False
    return bool(_BINARY_TEXT_RE.search(t.display_text()))


def is_context_receiver(base: Node | None, ctx_name: str | None) -> bool:
    """Does ``base`` refer to the handler's context parameter (or a member of it)?"""
    if base is None:
        return False
    if not ctx_name:
        return True
    base = strip_parens_and_casts(base)
    if base.type == "identifier":
        return text(base) == ctx_name
    if base.type == "member_expression":
        target = strip_parens_and_casts(member_object(base))
        return target.type == "identifier" and text(target) == ctx_name
    return False


def extract_statuses(oracle: TypeOracle, node: Node) -> list[int]:
    """Status codes an expression can take: literal, enum member, or literal-typed value."""
    expr = strip_parens_and_casts(node)
    if expr.type == "number":
        value = oracle.type_of(expr).literal_numeric_value()
        return [int(value)] if isinstance(value, (int, float)) else []
    if expr.type == "member_expression":
        value = enum_member_value(oracle, expr)
        if isinstance(value, int):
            return [value]
    t = oracle.type_of(expr)
    statuses: list[int] = []
    for member in t.union_members() or [t]:
        value = member.literal_numeric_value()
        if isinstance(value, int) and value not in statuses:
            statuses.append(value)
    return statuses


def find_explicit_content_type(oracle: TypeOracle, body: Node, ctx_name: str | None) -> str | None:
    """Value of the last ``c.header('content-type', ...)`` call in the body."""
    found = None
    for node in walk(body):
        if node.type != "call_expression":
            continue
        callee = node.child_by_field_name("function")
        if member_name(callee) != "header":
            continue
        base = strip_parens_and_casts(member_object(callee))
        if ctx_name and not (base.type == "identifier" and text(base) == ctx_name):
            continue
        args = call_arguments(node)
        if len(args) < 2:
            continue
        key = string_literal_value(args[0])
        if key is None or key.lower() != "content-type":
            continue
        value = resolve_to_string_literal(args[1], oracle)
        if value:
            found = value
    return found


def _options_property(options: Node | None, name: str) -> Node | None:
    if options is None or options.type != "object":
        return None
    for prop in named_children(options):
        if prop.type == "pair" and property_key(prop.child_by_field_name("key")) == name:
            return prop.child_by_field_name("value")
    return None


def infer_media_type_from_expression(oracle: TypeOracle, node: Node | None) -> str | None:
    """Media type of ``new Blob(parts, {type})`` / ``new File(parts, name, {type})``."""
    if node is None:
        return None
    expr = strip_parens_and_casts(node)
    if expr.type != "new_expression":
        return None
    name = text(expr.child_by_field_name("constructor"))
    if name not in ("Blob", "File"):
        return None
    args = call_arguments(expr)
    index = 2 if name == "File" else 1
    value = _options_property(args[index] if len(args) > index else None, "type")
    return resolve_to_string_literal(value, oracle) if value is not None else None


def _content_type_from_init(oracle: TypeOracle, init: Node | None) -> str | None:
    headers = _options_property(init, "headers")
    if headers is None or headers.type != "object":
        return None
    for prop in named_children(headers):
        if prop.type != "pair":
            continue
        key = property_key(prop.child_by_field_name("key"))
        if key and key.lower() == "content-type":
            return resolve_to_string_literal(prop.child_by_field_name("value"), oracle)
    return None


def _records(statuses: list[int], default: int | None = None, **fields) -> list[ResponseRecord]:
    codes = statuses or [default]
    return [ResponseRecord(status=code, **fields) for code in codes]


def _context_call(oracle, node, ctx_name, explicit_type) -> list[ResponseRecord]:
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "member_expression":
        return []
    call_name = member_name(callee)
    receiver = member_object(callee)
    # c.req.json() / c.req.text() read the request, they do not respond
    if member_name(strip_parens_and_casts(receiver)) == "req":
        return []
    if not is_context_receiver(receiver, ctx_name):
        return []
    args = call_arguments(node)
    value = args[0] if args else None
    statuses = extract_statuses(oracle, args[1]) if len(args) > 1 else []

    if call_name == "json":
        if value is None:
            return []
        t = oracle.type_of(value)
        return _records(statuses, content_schema=type_to_schema(t), type_text=t.display_text(),
                        media_type=explicit_type or "application/json")
    if call_name in ("text", "html"):
        default_type = "text/plain" if call_name == "text" else "text/html"
        return _records(statuses, content_schema=string_schema(), media_type=explicit_type or default_type)
    if call_name == "body":
        media_type = explicit_type or infer_media_type_from_expression(oracle, value) or "application/octet-stream"
        schema = binary_schema()
        if value is not None and oracle.type_of(value).is_string_like():
            media_type = explicit_type or "text/plain"
            schema = string_schema()
        return _records(statuses, content_schema=schema, media_type=media_type)
    if call_name == "notFound":
        # notFound takes no body, so a status would be its first argument
        return _records(extract_statuses(oracle, value) if value is not None else [], default=404)
    if call_name == "redirect":
        return _records(statuses, default=302, headers=dict(_LOCATION_HEADER))
    return []


def _response_constructor(oracle, node, explicit_type) -> list[ResponseRecord]:
    children = named_children(node)
    if not children:
        return []
    expr = strip_parens_and_casts(children[0])
    if expr.type != "new_expression" or text(expr.child_by_field_name("constructor")) != "Response":
        return []
    args = call_arguments(expr)
    body = args[0] if args else None
    init = args[1] if len(args) > 1 else None
    media_type = _content_type_from_init(oracle, init) or explicit_type
    status_node = _options_property(init, "status")
    statuses = extract_statuses(oracle, status_node) if status_node is not None else []

    schema = None
    if body is not None:
        t = oracle.type_of(body)
        if t.is_string_like():
            schema = string_schema()
        elif is_binary_like(t) or infer_media_type_from_expression(oracle, body):
            schema = binary_schema()
        elif not (t.is_any() or t.is_null() or t.is_undefined()):
            schema = type_to_schema(t)
    return _records(statuses, default=200, content_schema=schema, media_type=media_type)


def extract_responses(oracle: TypeOracle, body: Node | None, ctx_name: str | None = None) -> list[ResponseRecord]:
    """All responses emitted by a handler body, in source order."""
    if body is None:
        return []
    explicit_type = find_explicit_content_type(oracle, body, ctx_name)
    results: list[ResponseRecord] = []
    for node in walk(body):
        if node.type == "call_expression":
            results.extend(_context_call(oracle, node, ctx_name, explicit_type))
        elif node.type == "return_statement":
            results.extend(_response_constructor(oracle, node, explicit_type))
    return results
