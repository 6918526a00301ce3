"""Route recognition: finds ``app.<method>('/path', handler)`` calls in a file.

A call is a route registration when its callee is a member access named after
an HTTP method and its first argument is a string literal. By default the
receiver is not checked at all, so any object with a same-named method counts;
``AnalyzerConfig(receiver_policy="router")`` narrows that down.
"""

import logging
from typing import Iterator, NamedTuple

from tree_sitter import Node

from hono_openapi.routing.paths import extract_path_params

from .base import HTTP_METHODS, AnalyzerConfig, RouteRecord
from .nodes import (
    call_arguments,
    first_parameter_name,
    member_name,
    member_object,
    resolve_function,
    string_literal_value,
    strip_parens_and_casts,
    walk,
)
from .oracle import TypeOracle
from .request import extract_request_data
from .responses import extract_responses
from .source import SourceFile

logger = logging.getLogger(__name__)

# Calls that return the router itself, so chains like app.basePath('/v1').get(...) keep their receiver.
CHAINING_METHODS = set(HTTP_METHODS) | {"all", "on", "use", "route", "basePath", "onError", "notFound"}


class RouteCall(NamedTuple):
    method: str
    path: str
    call: Node
    handler: Node | None


def route_registration(node: Node) -> tuple[str, str] | None:
    """(method, path) if ``node`` is a route registration call."""
    if node.type != "call_expression":
        return None
    callee = node.child_by_field_name("function")
    method = member_name(callee)
    if method not in HTTP_METHODS:
        return None
    args = call_arguments(node)
    path = string_literal_value(args[0]) if args else None
    if path is None:
        return None
    return method, path


def is_router_receiver(oracle: TypeOracle, receiver: Node, router_types: list[str]) -> bool:
    """Does the receiver's type name one of the router types?"""
    receiver = strip_parens_and_casts(receiver)
    while receiver.type == "call_expression":
        callee = receiver.child_by_field_name("function")
        if member_name(callee) not in CHAINING_METHODS:
            return False
        receiver = strip_parens_and_casts(member_object(callee))
    name = oracle.type_of(receiver).symbol_name()
    return name in router_types


def find_handler(call: Node) -> Node | None:
    """The last function-like argument after the path (earlier ones are middleware)."""
    for arg in reversed(call_arguments(call)[1:]):
        func = resolve_function(arg)
        if func is not None:
            return func
    return None


def find_route_calls(source: SourceFile, oracle: TypeOracle, config: AnalyzerConfig | None = None) -> Iterator[RouteCall]:
    """Yield route registrations in document order."""
    config = config or AnalyzerConfig()
    for node in walk(source.root):
        found = route_registration(node)
        if found is None:
            continue
        if config.receiver_policy == "router":
            receiver = member_object(node.child_by_field_name("function"))
            if not is_router_receiver(oracle, receiver, config.router_types):
                continue
        method, path = found
        yield RouteCall(method, path, node, find_handler(node))


def analyze_source(source: SourceFile, config: AnalyzerConfig | None = None) -> list[RouteRecord]:
    """Discover the routes registered in one parsed file."""
    oracle = TypeOracle(source)
    routes: list[RouteRecord] = []
    for route in find_route_calls(source, oracle, config):
        body = ctx_name = None
        if route.handler is not None:
            body = route.handler.child_by_field_name("body")
            ctx_name = first_parameter_name(route.handler)
        responses = extract_responses(oracle, body, ctx_name)
        request = extract_request_data(oracle, body, ctx_name)
        first = responses[0] if responses else None
        routes.append(RouteRecord(
            method=route.method,
            path=route.path,
            path_params=extract_path_params(route.path),
            response_type_text=first.type_text if first else None,
            response_schema=first.content_schema if first else None,
            request_body_schema=request.body_schema,
            query_schema=request.query_schema,
            responses=responses,
        ))
        logger.debug("Found %s %s with %d responses", route.method.upper(), route.path, len(responses))
    return routes
